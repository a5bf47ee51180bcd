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
from numba import njit, prange, int64
import numpy as np
from scipy.sparse import csr_matrix, hstack, vstack, issparse
from typing import Sequence, Tuple


@njit(int64[:](int64[:], int64[:]), parallel=True)
def remap_indices(indices: np.ndarray, mapping: np.ndarray) -> np.ndarray:
    """
    Send every column index of a CSR matrix to its new position. Column ``j`` of
    the input becomes column ``mapping[j]`` of the output.

    The rows of a CSR matrix are independent of each other, so the nonzero
    elements are processed in parallel.

    Parameters
    ----------
    indices : np.ndarray, shape=(nnz,), dtype=int64
        The column indices of the nonzero elements in the sparse csr_matrix where
        nnz = number of nonzero elements
    mapping : np.ndarray, shape=(n_cols,), dtype=int64
        New column position of each of the original columns

    Returns
    -------
    np.ndarray, shape=(nnz,), dtype=int64
        Remapped column indices
    """
    assert indices.ndim == 1, "indices must be 1-d"
    assert mapping.ndim == 1, "mapping must be 1-d"

    out = np.empty(indices.shape[0], int64)
    for i in prange(indices.shape[0]):
        out[i] = mapping[indices[i]]

    return out


class SparseMatrixView:
    """
    Thin adapter over a scipy ``csr_matrix`` providing the reshaping primitives
    needed to align and combine document-feature matrices. Every operation returns
    a new view over newly allocated storage and leaves the values untouched; no
    operation builds a dense intermediate.

    Parameters
    ----------
    matrix : csr_matrix | np.ndarray | any scipy sparse matrix
        Values of the view. Always copied into a new csr_matrix

    Attributes
    ----------
    matrix : csr_matrix
        The underlying values
    """

    def __init__(self, matrix):
        if issparse(matrix):
            self.matrix = csr_matrix(matrix, copy=True)
        else:
            self.matrix = csr_matrix(np.atleast_2d(np.asarray(matrix)))
        self.matrix.sort_indices()

    @property
    def shape(self) -> Tuple[int, int]:
        return self.matrix.shape

    def select_columns(self, indices: Sequence[int]) -> "SparseMatrixView":
        """
        Return a view with only the columns in ``indices``, in that order. Repeated
        indices repeat the column.
        """
        indices = np.asarray(indices, dtype=np.int64).reshape(-1)
        if indices.size == 0:
            empty = csr_matrix((self.shape[0], 0), dtype=self.matrix.dtype)
            return SparseMatrixView(empty)
        return SparseMatrixView(self.matrix[:, indices])

    def select_rows(self, indices: Sequence[int]) -> "SparseMatrixView":
        """
        Return a view with only the rows in ``indices``, in that order.
        """
        indices = np.asarray(indices, dtype=np.int64).reshape(-1)
        if indices.size == 0:
            empty = csr_matrix((0, self.shape[1]), dtype=self.matrix.dtype)
            return SparseMatrixView(empty)
        return SparseMatrixView(self.matrix[indices, :])

    def zero_extend_columns(self, n_new: int) -> "SparseMatrixView":
        """
        Append ``n_new`` all-zero columns on the right. Only the shape changes, the
        stored nonzero elements stay where they are.

        Parameters
        ----------
        n_new : int
            Number of columns to append

        Returns
        -------
        SparseMatrixView
        """
        if n_new < 0:
            raise ValueError(f"{n_new=:} must be non-negative")
        m = self.matrix
        n_rows, n_cols = m.shape
        return SparseMatrixView(
            csr_matrix(
                (m.data.copy(), m.indices.copy(), m.indptr.copy()),
                shape=(n_rows, n_cols + n_new),
            )
        )

    def zero_extend_rows(self, n_new: int) -> "SparseMatrixView":
        """
        Append ``n_new`` all-zero rows at the bottom.
        """
        if n_new < 0:
            raise ValueError(f"{n_new=:} must be non-negative")
        m = self.matrix
        n_rows, n_cols = m.shape
        indptr = np.concatenate(
            (m.indptr, np.full(n_new, m.indptr[-1], dtype=m.indptr.dtype))
        )
        return SparseMatrixView(
            csr_matrix(
                (m.data.copy(), m.indices.copy(), indptr),
                shape=(n_rows + n_new, n_cols),
            )
        )

    def remap_columns(self, mapping: Sequence[int], n_cols: int) -> "SparseMatrixView":
        """
        Move each column ``j`` to position ``mapping[j]`` of a matrix with ``n_cols``
        columns. Positions not targeted by the mapping are all-zero columns. This is
        how a matrix gets padded into a larger feature space.

        Parameters
        ----------
        mapping : Sequence[int]
            New position for each of the current columns. Must be distinct and
            below ``n_cols``
        n_cols : int
            Number of columns of the result

        Returns
        -------
        SparseMatrixView
        """
        mapping = np.ascontiguousarray(mapping, dtype=np.int64).reshape(-1)
        m = self.matrix
        if mapping.shape[0] != m.shape[1]:
            raise ValueError(
                f"mapping has {mapping.shape[0]} entries but matrix has "
                + f"{m.shape[1]} columns"
            )
        if mapping.size and (mapping.min() < 0 or mapping.max() >= n_cols):
            raise ValueError(f"mapping must lie in [0, {n_cols})")
        if np.unique(mapping).size != mapping.size:
            raise ValueError("mapping must not send two columns to one position")

        indices = remap_indices(m.indices.astype(np.int64), mapping)
        out = csr_matrix(
            (m.data.copy(), indices, m.indptr.copy()), shape=(m.shape[0], n_cols)
        )
        # Remapping may break the within-row ordering of column indices
        out.sort_indices()
        return SparseMatrixView(out)

    @staticmethod
    def concat_rows(a: "SparseMatrixView", b: "SparseMatrixView") -> "SparseMatrixView":
        """
        Stack ``b`` below ``a``. Both must have the same number of columns.
        """
        if a.shape[1] != b.shape[1]:
            raise ValueError(
                f"cannot concatenate rows of matrices with {a.shape[1]} and "
                + f"{b.shape[1]} columns"
            )
        if b.shape[0] == 0:
            return SparseMatrixView(a.matrix)
        return SparseMatrixView(vstack([a.matrix, b.matrix], format="csr"))

    @staticmethod
    def concat_columns(
        a: "SparseMatrixView", b: "SparseMatrixView"
    ) -> "SparseMatrixView":
        """
        Place ``b`` to the right of ``a``. Both must have the same number of rows.
        """
        if a.shape[0] != b.shape[0]:
            raise ValueError(
                f"cannot concatenate columns of matrices with {a.shape[0]} and "
                + f"{b.shape[0]} rows"
            )
        if b.shape[1] == 0:
            return SparseMatrixView(a.matrix)
        return SparseMatrixView(hstack([a.matrix, b.matrix], format="csr"))

    def to_csr(self) -> csr_matrix:
        """
        Return a copy of the values as a csr_matrix.
        """
        return self.matrix.copy()
