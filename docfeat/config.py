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


class DfmOptions:
    """
    Settings passed explicitly into the combine and select entry points.

    Parameters
    ----------
    base_featname : str, optional
        Prefix given to feature names generated when scalars or matrices are
        coerced into Dfms during feature-wise combination. Only feature names
        starting with this prefix are renamed to make them unique. Default is
        "feat"
    verbose : bool, optional
        Verbosity used by feature selection when the caller does not pass one.
        Default is False

    Attributes
    ----------
    base_featname : str
        Prefix of generated feature names
    verbose : bool
        Default verbosity
    """

    def __init__(self, *, base_featname: str = "feat", verbose: bool = False):
        if not isinstance(base_featname, str) or not base_featname:
            raise ValueError(
                f"{base_featname=:} must be a non-empty string"
            )
        if not isinstance(verbose, bool):
            raise ValueError(f"verbose must be a bool. You gave {type(verbose)}")

        self.base_featname = base_featname
        self.verbose = verbose

    def __repr__(self) -> str:
        return (
            f"DfmOptions(base_featname={self.base_featname!r}, "
            + f"verbose={self.verbose})"
        )


DEFAULT_OPTIONS = DfmOptions()
