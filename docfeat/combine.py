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
from collections import Counter
import logging
import numbers
import numpy as np
from scipy.sparse import csr_matrix, issparse
from sklearn.utils.validation import check_array
from typing import Dict, Iterable, List, NamedTuple, Tuple
import warnings

from .config import DEFAULT_OPTIONS, DfmOptions
from .dfm import Dfm
from .exceptions import (
    Advisory,
    DocumentMismatchWarning,
    DuplicateDocumentWarning,
    DuplicateFeatureWarning,
    EmptyDimensionError,
)
from .labels import has_duplicates, make_unique
from .sparse import SparseMatrixView

logger = logging.getLogger("docfeat")


class CombineResult(NamedTuple):
    """
    Outcome of a combine operation.

    Attributes
    ----------
    dfm : Dfm
        The combined Dfm
    advisories : Tuple[Advisory, ...]
        Non-fatal advisories in the order they arose
    """

    dfm: Dfm
    advisories: Tuple[Advisory, ...] = ()


def union_mapping(a: Iterable[str], b: Iterable[str]) -> Tuple[List[str], List[int]]:
    """
    Union of two label sequences together with where each label of ``b`` lands in
    it. The union is all of ``a`` in order followed by the labels of ``b`` not in
    ``a``, in the order of ``b``. Repeated labels are treated as a multiset: the
    k-th occurrence of a label in ``b`` maps to the k-th occurrence in the union.

    Parameters
    ----------
    a : Iterable[str]
        Labels that keep their positions
    b : Iterable[str]
        Labels merged in after ``a``

    Returns
    -------
    union : List[str]
        The union of the labels
    mapping : List[int]
        Position in ``union`` of each label in ``b``
    """
    union = list(a)
    slots: Dict[str, List[int]] = {}
    for i, label in enumerate(union):
        slots.setdefault(label, []).append(i)

    used = Counter()
    mapping = []
    for label in b:
        k = used[label]
        used[label] += 1
        positions = slots.setdefault(label, [])
        if k >= len(positions):
            union.append(label)
            positions.append(len(union) - 1)
        mapping.append(positions[k])

    return union, mapping


class FeatureAligner:
    """
    Bring two Dfms onto a common feature space so they can be stacked row-wise.
    """

    def align(self, a: Dfm, b: Dfm) -> Tuple[Dfm, Dfm]:
        """
        Pad ``a`` and ``b`` with all-zero columns so that both have the union of
        their features, ordered as all of ``a.featnames`` followed by the features
        only in ``b`` in ``b``'s order.

        Parameters
        ----------
        a : Dfm
            Dfm whose features come first
        b : Dfm
            Dfm whose new features are appended

        Returns
        -------
        Tuple[Dfm, Dfm]
            ``a`` and ``b`` over identical feature names

        Raises
        ------
        EmptyDimensionError
            If either input has no documents or no features
        """
        for name, x in (("a", a), ("b", b)):
            if x.is_degenerate():
                raise EmptyDimensionError(
                    f"cannot align {name} with shape {x.shape}"
                )

        union, mapping = union_mapping(a.featnames, b.featnames)
        a_values = a.view().zero_extend_columns(len(union) - a.nfeat)
        b_values = b.view().remap_columns(mapping, len(union))

        return (
            Dfm(a_values, a.documents, union, a.meta, strict=False),
            Dfm(b_values, b.documents, union, b.meta, strict=False),
        )


class DfmCombiner:
    """
    Combine two or more Dfms by features (column-wise) or by documents (row-wise).
    More than two inputs are folded from the left, one pair at a time, and any
    advisories are collected in that order.

    Parameters
    ----------
    options : DfmOptions, optional
        Supplies the prefix of generated feature names. Default is DEFAULT_OPTIONS

    Attributes
    ----------
    options : DfmOptions
    aligner : FeatureAligner
    """

    def __init__(self, options: DfmOptions = None):
        self.options = DEFAULT_OPTIONS if options is None else options
        self.aligner = FeatureAligner()

    def _coerce(self, obj, like: Dfm) -> Dfm:
        """
        Turn a scalar, 1-d array, 2-d array, or sparse matrix into a Dfm with the
        documents and meta of ``like``. A scalar or 1-d array becomes a single
        feature named ``base_featname``. The columns of a matrix are named
        ``base_featname`` followed by 1, 2, ...
        """
        prefix = self.options.base_featname
        if isinstance(obj, (str, bytes)):
            raise TypeError(f"cannot combine a Dfm with {type(obj)}")
        if isinstance(obj, numbers.Number):
            values = csr_matrix(np.full((like.ndoc, 1), obj))
            return Dfm(values, like.documents, [prefix], like.meta, strict=False)

        try:
            values = check_array(
                obj, accept_sparse="csr", ensure_2d=False, dtype="numeric"
            )
        except (ValueError, TypeError) as e:
            raise TypeError(
                f"{type(obj)} must be a Dfm, a number, or a numeric matrix"
            ) from e

        if not issparse(values) and values.ndim == 1:
            return Dfm(
                values.reshape(-1, 1), like.documents, [prefix], like.meta, strict=False
            )
        features = [f"{prefix}{j + 1}" for j in range(values.shape[1])]
        return Dfm(values, like.documents, features, like.meta, strict=False)

    def _cbind(self, x, y, advisories: List[Advisory]) -> Dfm:
        if not isinstance(x, Dfm):
            if not isinstance(y, Dfm):
                raise TypeError("all arguments must be Dfms or coercible to one")
            x = self._coerce(x, y)
        if x.is_degenerate():
            return x.copy()
        if not isinstance(y, Dfm):
            y = self._coerce(y, x)

        if x.docnames != y.docnames:
            advisories.append(
                Advisory(
                    DocumentMismatchWarning,
                    "combining Dfms by feature with different document names",
                )
            )
        values = SparseMatrixView.concat_columns(x.view(), y.view())
        features = make_unique(
            x.featnames + y.featnames, self.options.base_featname
        )
        result = Dfm(values, x.documents, features, x.meta, strict=False)

        # Generated names are unique by now, any repeat is a user feature
        if has_duplicates(features):
            advisories.append(
                Advisory(
                    DuplicateFeatureWarning,
                    "combining Dfms with overlapping features results in "
                    + f"duplicated features: {result.features.duplicated()}",
                )
            )
        logger.debug(f"combined by feature {x.shape} + {y.shape} -> {result.shape}")

        return result

    def _rbind(self, x: Dfm, y: Dfm, advisories: List[Advisory]) -> Dfm:
        try:
            x_aligned, y_aligned = self.aligner.align(x, y)
        except EmptyDimensionError:
            if x.is_degenerate() or y.ndoc == 0:
                return x.copy()
            # y has documents but no features
            values = x.view().zero_extend_rows(y.ndoc)
            result = Dfm(
                values, x.docnames + y.docnames, x.features, x.meta, strict=False
            )
        else:
            values = SparseMatrixView.concat_rows(x_aligned.view(), y_aligned.view())
            result = Dfm(
                values,
                x.docnames + y.docnames,
                x_aligned.features,
                x.meta,
                strict=False,
            )

        new_dups = set(result.documents.duplicated()) - set(x.documents.duplicated())
        if new_dups:
            advisories.append(
                Advisory(
                    DuplicateDocumentWarning,
                    "combining Dfms by document results in duplicated document "
                    + f"names: {sorted(new_dups)}",
                )
            )
        logger.debug(f"combined by document {x.shape} + {y.shape} -> {result.shape}")

        return result

    def by_feature(self, *args) -> CombineResult:
        """
        Combine Dfms column-wise, joining their features. The documents are assumed
        to line up row for row; the result takes the documents of the left-most
        argument. Numbers and numeric matrices are coerced into Dfms that borrow the
        documents of the Dfm they are combined with.

        If the left operand has no documents or no features, a copy of it is
        returned. A single argument is also returned as a copy. Generated feature
        names (those starting with ``options.base_featname``) are made unique. A
        DuplicateFeatureWarning is raised at every step whose result still
        repeats a user feature.

        Parameters
        ----------
        *args : Dfm | number | np.ndarray | sparse matrix
            Objects to combine. At least one must be a Dfm

        Returns
        -------
        CombineResult
            Advisories may include DocumentMismatchWarning and
            DuplicateFeatureWarning

        Raises
        ------
        TypeError
            If no argument is a Dfm or an argument cannot be coerced to one
        ValueError
            If the number of rows does not match
        """
        if not any(isinstance(a, Dfm) for a in args):
            raise TypeError("at least one input object must be a Dfm")
        if len(args) == 1:
            return CombineResult(args[0].copy(), ())

        advisories = []
        result = args[0]
        for y in args[1:]:
            result = self._cbind(result, y, advisories)

        return CombineResult(result, tuple(advisories))

    def by_document(self, *args: Dfm) -> CombineResult:
        """
        Combine Dfms row-wise, joining their documents. Features are matched by
        name and any feature missing from one side is filled with zeros.

        **NOTE** The order of the features in the result depends on the order the
        Dfms are folded in. Each step keeps the left features first and appends the
        new ones from the right. No other ordering is guaranteed.

        A single argument, or a left operand with no documents or no features, is
        returned as a copy.

        The settings (meta) of the left-most Dfm are kept.

        Parameters
        ----------
        *args : Dfm
            Dfms to combine

        Returns
        -------
        CombineResult
            Advisories may include DuplicateDocumentWarning

        Raises
        ------
        TypeError
            If any argument is not a Dfm
        """
        if not args:
            raise TypeError("at least one input object must be a Dfm")
        for a in args:
            if not isinstance(a, Dfm):
                raise TypeError(
                    f"all arguments must be Dfm objects. You gave {type(a)}"
                )
        if len(args) == 1:
            return CombineResult(args[0].copy(), ())

        advisories = []
        result = args[0]
        for y in args[1:]:
            result = self._rbind(result, y, advisories)

        return CombineResult(result, tuple(advisories))


def _emit(advisories: Iterable[Advisory]):
    for advisory in advisories:
        warnings.warn(advisory.message, advisory.code, stacklevel=3)


def combine_by_feature(*args, options: DfmOptions = None) -> Dfm:
    """
    Combine Dfms, numbers, or numeric matrices column-wise. See
    :meth:`DfmCombiner.by_feature`. Advisories are issued as warnings.

    Parameters
    ----------
    *args : Dfm | number | np.ndarray | sparse matrix
        Objects to combine. At least one must be a Dfm
    options : DfmOptions, optional
        Default is DEFAULT_OPTIONS

    Returns
    -------
    Dfm

    Examples
    --------

    ::

        import numpy as np
        from docfeat import Dfm, combine_by_feature

        x = Dfm(np.array([[1, 0], [2, 3]]), ["d1", "d2"], ["a", "b"])
        combine_by_feature(x, 100).featnames
        # ['a', 'b', 'feat']
        combine_by_feature(x, 100, 101).featnames
        # ['a', 'b', 'feat', 'feat1']

    """
    result = DfmCombiner(options).by_feature(*args)
    _emit(result.advisories)
    return result.dfm


def combine_by_document(*args: Dfm, options: DfmOptions = None) -> Dfm:
    """
    Combine Dfms row-wise with features matched by name. See
    :meth:`DfmCombiner.by_document`. Advisories are issued as warnings.

    Parameters
    ----------
    *args : Dfm
        Dfms to combine
    options : DfmOptions, optional
        Default is DEFAULT_OPTIONS

    Returns
    -------
    Dfm
    """
    result = DfmCombiner(options).by_document(*args)
    _emit(result.advisories)
    return result.dfm
