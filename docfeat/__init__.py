"""
docfeat aligns, combines, and selects features of sparse document-feature matrices
(Dfm), the central artifact of a text-analysis pipeline.

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
__version__ = "0.1.0"


from docfeat.config import DfmOptions, DEFAULT_OPTIONS
from docfeat.exceptions import (
    Advisory,
    DocfeatWarning,
    DocumentMismatchWarning,
    DuplicateDocumentWarning,
    DuplicateFeatureWarning,
    DuplicateLabelError,
    EmptyDimensionError,
    PatternError,
)
from docfeat.labels import LabelIndex, make_unique
from docfeat.dfm import Dfm, DfmMeta
from docfeat.sparse import SparseMatrixView
from docfeat.pattern import (
    Dictionary,
    Labels,
    PatternMatcher,
    ReferenceDfm,
    ValueType,
    glob_to_regex,
    resolve_pattern,
)
from docfeat.combine import (
    CombineResult,
    DfmCombiner,
    FeatureAligner,
    combine_by_document,
    combine_by_feature,
)
from docfeat.select import (
    DfmSelector,
    keep_features,
    pad_to_features,
    remove_features,
    select_features,
)
