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
import numpy as np
import pytest
from pytest import approx
from scipy.sparse import csr_matrix

from docfeat.config import DfmOptions
from docfeat.dfm import Dfm, DfmMeta
from docfeat.exceptions import DuplicateLabelError, PatternError
from docfeat.labels import LabelIndex, has_duplicates, make_unique
from docfeat.pattern import (
    Dictionary,
    Labels,
    PatternMatcher,
    ReferenceDfm,
    ValueType,
    glob_to_regex,
    resolve_pattern,
)
from docfeat.sparse import SparseMatrixView, remap_indices


def test_label_index():
    """
    Test positions and the strict constructor of LabelIndex
    """
    index = LabelIndex.build(["cat", "dog", "fox"])
    assert index.position_of("dog") == 1
    assert index.position_of("cow") is None
    assert index.positions_of(["fox", "cow", "cat"]) == [2, None, 0]
    assert index.labels_in_order() == ["cat", "dog", "fox"]
    assert len(index) == 3
    assert "fox" in index

    with pytest.raises(DuplicateLabelError):
        LabelIndex.build(["cat", "dog", "cat"])

    # Tolerated when built directly, first occurrence wins
    index = LabelIndex(["cat", "dog", "cat"])
    assert index.position_of("cat") == 0
    assert index.duplicated() == ["cat"]


def test_make_unique():
    """
    Test that only generated labels get renamed and that the smallest unused suffix
    is chosen
    """
    labels = ["feat", "a", "feat", "feat1", "feat"]
    assert make_unique(labels, "feat") == ["feat", "a", "feat2", "feat1", "feat3"]

    # User labels stay duplicated
    labels = ["a", "a", "feat", "feat"]
    out = make_unique(labels, "feat")
    assert out == ["a", "a", "feat", "feat1"]
    assert has_duplicates(out)
    assert not has_duplicates(make_unique(["feat", "feat", "feat"], "feat"))


def test_glob_to_regex():
    assert glob_to_regex("*i*") == ".*i.*"
    assert glob_to_regex("a?c") == "a.c"
    assert glob_to_regex("a.b") == r"a\.b"


def test_pattern_matcher_glob():
    """
    Glob patterns must match the whole label
    """
    index = LabelIndex(["apple", "banana", "kiwi", "fig", "Pineapple"])
    matcher = PatternMatcher("glob", case_insensitive=True)
    assert matcher.match_sorted(["*i*"], index) == [2, 3, 4]
    assert matcher.match_sorted(["app*"], index) == [0]
    assert matcher.match_sorted(["?ig"], index) == [3]
    assert matcher.match_sorted(["pine*"], index) == [4]

    matcher = PatternMatcher(ValueType.GLOB, case_insensitive=False)
    assert matcher.match_sorted(["pine*"], index) == []


def test_pattern_matcher_regex():
    """
    Regex patterns are anchored at both ends and malformed ones raise
    """
    index = LabelIndex(["tax", "taxation", "syntax"])
    matcher = PatternMatcher("regex", case_insensitive=True)
    assert matcher.match_sorted(["tax"], index) == [0]
    assert matcher.match_sorted(["tax.*"], index) == [0, 1]
    assert matcher.match_sorted([".*tax"], index) == [0, 2]

    with pytest.raises(PatternError):
        matcher.match(["tax", "(unclosed"], index)


def test_pattern_matcher_fixed_order():
    """
    Fixed matching, case handling, deduplication, and pattern order
    """
    index = LabelIndex(["The", "the", "cat", "dog"])
    matcher = PatternMatcher("fixed", case_insensitive=False)
    assert matcher.match(["the"], index) == [1]
    assert matcher.match(["dog", "cat", "dog"], index) == [3, 2]

    matcher = PatternMatcher("fixed", case_insensitive=True)
    assert matcher.match(["THE"], index) == [0, 1]
    assert matcher.match_sorted(["dog", "the"], index) == [0, 1, 3]
    assert matcher.match(["dog", "the"], index) == [3, 0, 1]


def test_value_type_parse():
    assert ValueType.parse("Regex") is ValueType.REGEX
    with pytest.raises(ValueError):
        ValueType.parse("fuzzy")


def test_resolve_pattern():
    """
    Test that each pattern form resolves to the right input type
    """
    x = Dfm(np.eye(2), ["d1", "d2"], ["a", "b"])
    assert resolve_pattern(None) is None
    assert isinstance(resolve_pattern("a*"), Labels)
    assert resolve_pattern(("a", "b")).patterns == ["a", "b"]
    assert isinstance(resolve_pattern({"g": ["a b"]}), Dictionary)
    resolved = resolve_pattern(x)
    assert isinstance(resolved, ReferenceDfm)
    assert resolved.patterns == ["a", "b"]

    with pytest.raises(TypeError):
        resolve_pattern(42)
    with pytest.raises(TypeError):
        resolve_pattern(["a", 1])


def test_dictionary_entries():
    """
    Test that nested groups are flattened in order and spaces become the
    concatenator
    """
    dictionary = Dictionary(
        {
            "countries": ["United States", "Sweden"],
            "other": {"ends_in_y": ["by", "my"], "single": "blah blah"},
        }
    )
    assert dictionary.values() == ["United States", "Sweden", "by", "my", "blah blah"]
    assert dictionary.entries("_") == [
        "United_States",
        "Sweden",
        "by",
        "my",
        "blah_blah",
    ]

    # Tabs and repeated spaces collapse into a single concatenator
    dictionary = Dictionary({"phrases": ["new  york\tcity", " los angeles "]})
    assert dictionary.entries("+") == ["new+york+city", "los+angeles"]


def test_remap_indices():
    """
    Test the numba kernel that moves column indices
    """
    indices = np.array([0, 2, 1, 0], dtype=np.int64)
    mapping = np.array([4, 0, 3], dtype=np.int64)
    out = remap_indices(indices, mapping)
    assert out.tolist() == [4, 3, 0, 4]


def test_sparse_view():
    """
    Test that the reshaping primitives keep values and never change the input
    """
    m = csr_matrix(np.array([[1, 0, 2], [0, 3, 0]], dtype=np.float64))
    view = SparseMatrixView(m)

    assert view.select_columns([2, 0]).to_csr().toarray().tolist() == [
        [2, 1],
        [0, 0],
    ]
    assert view.select_columns([]).shape == (2, 0)
    assert view.select_rows([1]).to_csr().toarray().tolist() == [[0, 3, 0]]

    extended = view.zero_extend_columns(2)
    assert extended.shape == (2, 5)
    assert extended.to_csr().nnz == 3
    assert extended.to_csr().toarray()[:, 3:].sum() == 0

    assert view.zero_extend_rows(1).to_csr().toarray().tolist() == [
        [1, 0, 2],
        [0, 3, 0],
        [0, 0, 0],
    ]

    remapped = view.remap_columns([3, 0, 1], 4)
    assert remapped.to_csr().toarray().tolist() == [[0, 2, 0, 1], [3, 0, 0, 0]]
    with pytest.raises(ValueError):
        view.remap_columns([0, 0, 1], 4)
    with pytest.raises(ValueError):
        view.remap_columns([0, 1], 4)

    stacked = SparseMatrixView.concat_rows(view, view)
    assert stacked.shape == (4, 3)
    joined = SparseMatrixView.concat_columns(view, view)
    assert joined.shape == (2, 6)
    with pytest.raises(ValueError):
        SparseMatrixView.concat_rows(view, extended)
    with pytest.raises(ValueError):
        SparseMatrixView.concat_columns(view, stacked)

    # Input untouched
    assert m.toarray().tolist() == [[1, 0, 2], [0, 3, 0]]


def test_dfm_basics():
    """
    Test Dfm construction, shape checks, accessors, and copy semantics
    """
    values = csr_matrix(np.array([[1, 2], [0, 1]]))
    meta = DfmMeta(concatenator="+", ngrams=(1, 2))
    x = Dfm(values, ["d1", "d2"], ["cat", "dog"], meta)

    assert x.shape == (2, 2)
    assert x.docnames == ["d1", "d2"]
    assert x.featnames == ["cat", "dog"]
    assert x["d1", "dog"] == 2
    assert x["cat"].tolist() == [1, 0]
    assert x.nnz == 3
    assert x.col_sums().tolist() == [1, 3]
    assert x.row_sums().tolist() == [3, 1]
    assert x.col_means() == approx([0.5, 1.5])
    assert x.row_means() == approx([1.5, 0.5])
    assert x.meta == meta
    assert x.meta is not meta

    values[0, 0] = 99
    assert x["d1", "cat"] == 1, "Dfm must not share storage with its input"
    x.values[0, 1] = 99
    assert x["d1", "dog"] == 2, "values must be a copy"

    t = x.T
    assert t.docnames == ["cat", "dog"]
    assert t.featnames == ["d1", "d2"]
    assert t["dog", "d1"] == 2

    with pytest.raises(ValueError):
        Dfm(np.eye(2), ["d1"], ["a", "b"])
    with pytest.raises(DuplicateLabelError):
        Dfm(np.eye(2), ["d1", "d1"], ["a", "b"])

    empty = Dfm.empty_like(x)
    assert empty.shape == (2, 0)
    assert empty.docnames == ["d1", "d2"]
    assert empty.is_degenerate()


def test_options():
    assert DfmOptions().base_featname == "feat"
    with pytest.raises(ValueError):
        DfmOptions(base_featname="")
    with pytest.raises(ValueError):
        DfmOptions(verbose="yes")
