"""
docfeat aligns, combines, and selects features of sparse document-feature matrices.

Copyright (C) 2022 Matthew Hendrey & Brendan Murphy

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""
from typing import NamedTuple, Type


class EmptyDimensionError(ValueError):
    """
    Raised when a Dfm with zero documents or zero features is asked to take part in
    feature alignment.
    """


class DuplicateLabelError(ValueError):
    """
    Raised when duplicate labels are supplied to a strict LabelIndex.
    """


class PatternError(ValueError):
    """
    Raised when a regular expression pattern fails to compile.
    """


class DocfeatWarning(UserWarning):
    """
    Base class for the non-fatal advisories issued while combining Dfms.
    """


class DocumentMismatchWarning(DocfeatWarning):
    """
    Feature-wise combination of Dfms whose document names differ.
    """


class DuplicateFeatureWarning(DocfeatWarning):
    """
    Feature-wise combination left duplicated user feature names.
    """


class DuplicateDocumentWarning(DocfeatWarning):
    """
    Document-wise combination produced repeated document names.
    """


class Advisory(NamedTuple):
    """
    A non-fatal advisory produced by a combine operation.

    Attributes
    ----------
    code : Type[DocfeatWarning]
        Warning class identifying the advisory
    message : str
        Human readable description
    """

    code: Type[DocfeatWarning]
    message: str
