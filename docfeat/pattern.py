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
from enum import Enum
import re
from typing import Dict, Iterable, List, Mapping, Union

from .dfm import Dfm
from .exceptions import PatternError
from .labels import LabelIndex


class ValueType(Enum):
    """
    How a pattern is matched against a label.

    FIXED
        Exact string equality
    GLOB
        ``*`` matches any run of characters and ``?`` exactly one character
    REGEX
        Regular expression that must match the whole label
    """

    FIXED = "fixed"
    GLOB = "glob"
    REGEX = "regex"

    @classmethod
    def parse(cls, valuetype: Union[str, "ValueType"]) -> "ValueType":
        if isinstance(valuetype, cls):
            return valuetype
        try:
            return cls(str(valuetype).lower())
        except ValueError:
            raise ValueError(
                f"{valuetype=:} must be one of 'glob', 'regex', or 'fixed'"
            ) from None


def glob_to_regex(pattern: str) -> str:
    """
    Translate a glob pattern into an equivalent regular expression. Only ``*`` and
    ``?`` are wildcards; every other character is matched literally.

    Parameters
    ----------
    pattern : str
        Glob pattern

    Returns
    -------
    str
        Regular expression meant to be used with ``re.fullmatch``
    """
    parts = []
    for c in pattern:
        if c == "*":
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        else:
            parts.append(re.escape(c))
    return "".join(parts)


class PatternMatcher:
    """
    Resolve a set of patterns to the positions of the labels they match. A label is
    matched if any one of the patterns matches it. Glob and regex patterns must
    match the whole label, not just a part of it.

    Parameters
    ----------
    valuetype : str | ValueType, optional
        One of "glob", "regex", or "fixed". Default is "glob"
    case_insensitive : bool, optional
        If True, ignore case when matching. Default is True

    Attributes
    ----------
    valuetype : ValueType
        Type of matching to perform
    case_insensitive : bool
        Whether case is ignored
    """

    def __init__(
        self,
        valuetype: Union[str, ValueType] = ValueType.GLOB,
        case_insensitive: bool = True,
    ):
        self.valuetype = ValueType.parse(valuetype)
        self.case_insensitive = case_insensitive

    def _compile(self, patterns: List[str]) -> List[re.Pattern]:
        flags = re.IGNORECASE if self.case_insensitive else 0
        compiled = []
        for p in patterns:
            regex = glob_to_regex(p) if self.valuetype is ValueType.GLOB else p
            try:
                compiled.append(re.compile(regex, flags))
            except re.error as e:
                raise PatternError(f"invalid pattern {p!r}: {e}") from e
        return compiled

    def match(self, patterns: Iterable[str], candidates: LabelIndex) -> List[int]:
        """
        Positions of the candidates matched by any of ``patterns``. Each position
        appears once, ordered by the first pattern that matched it and then by
        position. Use :meth:`match_sorted` for ascending position order.

        Parameters
        ----------
        patterns : Iterable[str]
            Patterns to match
        candidates : LabelIndex
            Labels to match against

        Returns
        -------
        List[int]

        Raises
        ------
        PatternError
            If a regex pattern does not compile. Raised before any matching.
        """
        patterns = [str(p) for p in patterns]
        labels = candidates.labels_in_order()

        if self.valuetype is ValueType.FIXED:
            lookup: Dict[str, List[int]] = {}
            for i, label in enumerate(labels):
                key = label.lower() if self.case_insensitive else label
                lookup.setdefault(key, []).append(i)
            hits = (
                lookup.get(p.lower() if self.case_insensitive else p, [])
                for p in patterns
            )
        else:
            compiled = self._compile(patterns)
            hits = (
                [i for i, label in enumerate(labels) if regex.fullmatch(label)]
                for regex in compiled
            )

        matched = []
        seen = set()
        for positions in hits:
            for i in positions:
                if i not in seen:
                    seen.add(i)
                    matched.append(i)

        return matched

    def match_sorted(
        self, patterns: Iterable[str], candidates: LabelIndex
    ) -> List[int]:
        """
        Same as :meth:`match` but in ascending position order.
        """
        return sorted(self.match(patterns, candidates))


class Labels:
    """
    Pattern input given as a plain sequence of patterns.
    """

    def __init__(self, patterns: Iterable[str]):
        self.patterns = [str(p) for p in patterns]

    def __repr__(self) -> str:
        return f"Labels({self.patterns!r})"


class Dictionary:
    """
    Ordered groups of entries, for example {"countries": ["United States",
    "Sweden"], "pronouns": ["i", "me"]}. Groups may be nested. Multi-word entries
    have their words separated by whitespace.

    Parameters
    ----------
    groups : Mapping
        Group name to a list of entries or to a Mapping of further groups
    """

    def __init__(self, groups: Mapping):
        if not isinstance(groups, Mapping):
            raise TypeError(f"groups must be a Mapping. You gave {type(groups)}")
        self.groups = groups

    def values(self) -> List[str]:
        """
        All entries, flattened in group order.
        """
        return list(_flatten(self.groups))

    def entries(self, concatenator: str) -> List[str]:
        """
        All entries with each run of whitespace between words replaced by
        ``concatenator``, so that they match the labels of multi-word features.
        """
        return [concatenator.join(entry.split()) for entry in self.values()]

    def __repr__(self) -> str:
        return f"Dictionary({dict(self.groups)!r})"


def _flatten(groups):
    for value in groups.values():
        if isinstance(value, Mapping):
            yield from _flatten(value)
        elif isinstance(value, str):
            yield value
        else:
            for entry in value:
                yield str(entry)


class ReferenceDfm:
    """
    Pattern input given as another Dfm whose feature set is to be matched exactly.
    """

    def __init__(self, dfm):
        self.dfm = dfm

    @property
    def patterns(self) -> List[str]:
        return self.dfm.featnames

    def __repr__(self) -> str:
        return f"ReferenceDfm({self.dfm!r})"


PatternInput = Union[Labels, Dictionary, ReferenceDfm]


def resolve_pattern(pattern) -> Union[PatternInput, None]:
    """
    Turn any accepted form of pattern into one of the pattern input types.

    Parameters
    ----------
    pattern : None | str | Iterable[str] | Mapping | Dictionary | Dfm | PatternInput
        A single pattern, patterns, a dictionary of entries, or a Dfm

    Returns
    -------
    Labels | Dictionary | ReferenceDfm | None
        None if ``pattern`` is None

    Raises
    ------
    TypeError
        If ``pattern`` is none of the accepted forms
    """
    if pattern is None or isinstance(pattern, (Labels, Dictionary, ReferenceDfm)):
        return pattern
    if isinstance(pattern, Dfm):
        return ReferenceDfm(pattern)
    if isinstance(pattern, Mapping):
        return Dictionary(pattern)
    if isinstance(pattern, str):
        return Labels([pattern])
    if isinstance(pattern, Iterable):
        pattern = list(pattern)
        if not all(isinstance(p, str) for p in pattern):
            raise TypeError("patterns must all be str")
        return Labels(pattern)
    raise TypeError(
        f"pattern must be str, Iterable[str], Mapping, or Dfm. You gave {type(pattern)}"
    )
