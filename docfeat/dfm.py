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
import copy
import numpy as np
from scipy.sparse import csr_matrix, issparse
from typing import Dict, Iterable, List, Tuple, Union

from . import __version__
from .labels import LabelIndex
from .sparse import SparseMatrixView


class DfmMeta:
    """
    Settings carried along with a Dfm. The combine and select operations never
    interpret these beyond the ``concatenator``; they copy them onto their results.

    Parameters
    ----------
    weight_tf : str, optional
        Term frequency weighting scheme. Default is "count"
    weight_df : str, optional
        Document frequency weighting scheme. Default is "unary"
    smooth : float, optional
        Smoothing parameter. Default is 0.0
    ngrams : Tuple[int], optional
        N-gram orders used to build the features. Default is (1,)
    skip : Tuple[int], optional
        Skip-gram distances used to build the features. Default is (0,)
    concatenator : str, optional
        String joining the words of multi-word features. Default is "_"
    version : str, optional
        Version of docfeat that built the Dfm. Default is the current version
    settings : Dict, optional
        Any other settings from corpus handling and tokenization. Default is {}
    """

    def __init__(
        self,
        *,
        weight_tf: str = "count",
        weight_df: str = "unary",
        smooth: float = 0.0,
        ngrams: Tuple[int, ...] = (1,),
        skip: Tuple[int, ...] = (0,),
        concatenator: str = "_",
        version: str = __version__,
        settings: Dict = None,
    ):
        self.weight_tf = weight_tf
        self.weight_df = weight_df
        self.smooth = smooth
        self.ngrams = tuple(ngrams)
        self.skip = tuple(skip)
        self.concatenator = concatenator
        self.version = version
        self.settings = {} if settings is None else dict(settings)

    def copy(self) -> "DfmMeta":
        return copy.deepcopy(self)

    def __eq__(self, other) -> bool:
        if isinstance(other, DfmMeta):
            return self.__dict__ == other.__dict__
        return NotImplemented

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"DfmMeta({args})"


class Dfm:
    """
    Document-feature matrix. A sparse matrix whose rows are labeled by document
    names and whose columns are labeled by feature names. A Dfm is treated as a
    value: operations return new Dfms and never share storage with their inputs.

    Parameters
    ----------
    values : csr_matrix | np.ndarray | any scipy sparse matrix
        Counts or weights with shape (n_documents, n_features). Always copied
    documents : Iterable[str]
        Document names, one per row
    features : Iterable[str]
        Feature names, one per column
    meta : DfmMeta, optional
        Settings to carry along. Default is DfmMeta()
    strict : bool, optional
        If True, duplicate document or feature names raise a DuplicateLabelError.
        Results of combine and select operations are built with False.
        Default is True

    Attributes
    ----------
    documents : LabelIndex
        Row labels
    features : LabelIndex
        Column labels
    meta : DfmMeta
        Carried settings

    Examples
    --------

    ::

        import numpy as np
        from docfeat import Dfm

        x = Dfm(
            np.array([[1, 2], [0, 1]]),
            documents=["d1", "d2"],
            features=["cat", "dog"],
        )
        x.featnames
        # ['cat', 'dog']

    """

    def __init__(
        self,
        values,
        documents: Iterable[str],
        features: Iterable[str],
        meta: DfmMeta = None,
        *,
        strict: bool = True,
    ):
        if strict:
            self.documents = LabelIndex.build(documents)
            self.features = LabelIndex.build(features)
        else:
            self.documents = LabelIndex(documents)
            self.features = LabelIndex(features)

        shape = (len(self.documents), len(self.features))
        if isinstance(values, SparseMatrixView):
            values = values.matrix
        if issparse(values):
            self._values = csr_matrix(values, copy=True)
        else:
            values = np.asarray(values)
            if values.size == 0:
                self._values = csr_matrix(shape, dtype=values.dtype)
            else:
                self._values = csr_matrix(np.atleast_2d(values))

        if self._values.shape != shape:
            raise ValueError(
                f"values have shape {self._values.shape} but there are "
                + f"{shape[0]} documents and {shape[1]} features"
            )
        self.meta = DfmMeta() if meta is None else meta.copy()

    @classmethod
    def empty_like(cls, x: "Dfm") -> "Dfm":
        """
        Dfm with the documents and meta of ``x`` but no features.
        """
        return cls(
            csr_matrix((x.ndoc, 0), dtype=x._values.dtype),
            x.documents,
            [],
            x.meta,
            strict=False,
        )

    def copy(self) -> "Dfm":
        """
        New Dfm with the same labels, values, and meta, sharing no storage.
        """
        return Dfm(
            self._values, self.documents, self.features, self.meta, strict=False
        )

    @property
    def values(self) -> csr_matrix:
        """
        Copy of the values as a csr_matrix.
        """
        return self._values.copy()

    def view(self) -> SparseMatrixView:
        return SparseMatrixView(self._values)

    @property
    def docnames(self) -> List[str]:
        return self.documents.labels_in_order()

    @property
    def featnames(self) -> List[str]:
        return self.features.labels_in_order()

    @property
    def ndoc(self) -> int:
        return len(self.documents)

    @property
    def nfeat(self) -> int:
        return len(self.features)

    @property
    def shape(self) -> Tuple[int, int]:
        return self._values.shape

    @property
    def nnz(self) -> int:
        return self._values.count_nonzero()

    def is_degenerate(self) -> bool:
        """
        True if the Dfm has no documents or no features.
        """
        return self.ndoc == 0 or self.nfeat == 0

    def transpose(self) -> "Dfm":
        """
        Swap documents and features.
        """
        return Dfm(
            self._values.T.tocsr(),
            self.features,
            self.documents,
            self.meta,
            strict=False,
        )

    @property
    def T(self) -> "Dfm":
        return self.transpose()

    def col_sums(self) -> np.ndarray:
        return np.asarray(self._values.sum(axis=0)).reshape(-1)

    def row_sums(self) -> np.ndarray:
        return np.asarray(self._values.sum(axis=1)).reshape(-1)

    def col_means(self) -> np.ndarray:
        if self.ndoc == 0:
            return np.full(self.nfeat, np.nan)
        return self.col_sums() / self.ndoc

    def row_means(self) -> np.ndarray:
        if self.nfeat == 0:
            return np.full(self.ndoc, np.nan)
        return self.row_sums() / self.nfeat

    def __getitem__(self, key: Union[str, Tuple[str, str]]):
        """
        Value of a cell given (document, feature) names, or the full column for a
        feature name as a 1-d np.ndarray.
        """
        if isinstance(key, tuple):
            doc, feat = key
            i = self.documents.position_of(doc)
            j = self.features.position_of(feat)
            if i is None or j is None:
                raise KeyError(key)
            return self._values[i, j]
        j = self.features.position_of(key)
        if j is None:
            raise KeyError(key)
        return self._values[:, j].toarray().reshape(-1)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Dfm):
            return NotImplemented
        if self.documents != other.documents or self.features != other.features:
            return False
        return (self._values != other._values).nnz == 0

    def __repr__(self) -> str:
        docs = self.docnames[:3] + (["..."] if self.ndoc > 3 else [])
        feats = self.featnames[:5] + (["..."] if self.nfeat > 5 else [])
        return (
            f"Dfm({self.ndoc} documents, {self.nfeat} features, "
            + f"documents={docs}, features={feats})"
        )
