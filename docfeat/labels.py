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
from typing import Dict, Iterable, Iterator, List, Optional

from .exceptions import DuplicateLabelError


class LabelIndex:
    """
    Ordered, bidirectional mapping between string labels (document or feature
    names) and their positions.

    Constructing directly tolerates duplicate labels, which merges may transiently
    produce. Use :meth:`LabelIndex.build` for labels coming from a single source,
    where duplicates are an error.

    Parameters
    ----------
    labels : Iterable[str]
        Labels in positional order

    Attributes
    ----------
    labels : tuple
        The labels in positional order. Never mutated.
    """

    def __init__(self, labels: Iterable[str] = ()):
        self.labels = tuple(str(label) for label in labels)
        # Built lazily, owned by this instance only
        self._positions = None

    @classmethod
    def build(cls, labels: Iterable[str]) -> "LabelIndex":
        """
        Create a LabelIndex, rejecting duplicate labels.

        Parameters
        ----------
        labels : Iterable[str]
            Labels in positional order

        Returns
        -------
        LabelIndex

        Raises
        ------
        DuplicateLabelError
            If any label occurs more than once
        """
        index = cls(labels)
        dups = index.duplicated()
        if dups:
            raise DuplicateLabelError(f"duplicate labels are not allowed: {dups}")
        return index

    def _position_map(self) -> Dict[str, int]:
        if self._positions is None:
            positions = {}
            for i, label in enumerate(self.labels):
                positions.setdefault(label, i)
            self._positions = positions
        return self._positions

    def position_of(self, label: str) -> Optional[int]:
        """
        Position of the first occurrence of ``label`` or None if absent.
        """
        return self._position_map().get(label)

    def positions_of(self, labels: Iterable[str]) -> List[Optional[int]]:
        """
        Positions of the first occurrence of each of ``labels``, None for those
        absent.
        """
        positions = self._position_map()
        return [positions.get(label) for label in labels]

    def labels_in_order(self) -> List[str]:
        return list(self.labels)

    def duplicated(self) -> List[str]:
        """
        Labels that occur more than once, in order of first occurrence.
        """
        counts = Counter(self.labels)
        return [label for label, n in counts.items() if n > 1]

    def __len__(self) -> int:
        return len(self.labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels)

    def __contains__(self, label) -> bool:
        return label in self._position_map()

    def __getitem__(self, i):
        return self.labels[i]

    def __eq__(self, other) -> bool:
        if isinstance(other, LabelIndex):
            return self.labels == other.labels
        return NotImplemented

    def __repr__(self) -> str:
        return f"LabelIndex({list(self.labels)!r})"


def make_unique(labels: Iterable[str], prefix: str) -> List[str]:
    """
    Rename repeated generated labels so they become unique. Only labels starting
    with ``prefix`` take part. The first occurrence of a generated label keeps its
    name and every later occurrence gets the smallest positive integer suffix that
    is not already used by another generated label. Labels not starting with
    ``prefix`` are returned unchanged, duplicates included.

    For example, with prefix "feat", ["feat", "a", "feat", "feat1", "feat"]
    becomes ["feat", "a", "feat2", "feat1", "feat3"].

    Parameters
    ----------
    labels : Iterable[str]
        Labels in positional order
    prefix : str
        Marker at the start of internally generated labels

    Returns
    -------
    List[str]
    """
    labels = list(labels)
    generated = [i for i, label in enumerate(labels) if label.startswith(prefix)]
    taken = set(labels[i] for i in generated)
    seen = set()
    for i in generated:
        label = labels[i]
        if label not in seen:
            seen.add(label)
            continue
        k = 1
        while f"{label}{k}" in taken:
            k += 1
        labels[i] = f"{label}{k}"
        taken.add(labels[i])
        seen.add(labels[i])

    return labels


def has_duplicates(labels: Iterable[str]) -> bool:
    labels = list(labels)
    return len(set(labels)) != len(labels)
