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
import logging
from typing import List, Union

from .config import DEFAULT_OPTIONS, DfmOptions
from .dfm import Dfm
from .labels import LabelIndex
from .pattern import (
    Dictionary,
    PatternMatcher,
    ReferenceDfm,
    ValueType,
    resolve_pattern,
)

logger = logging.getLogger("docfeat")

KEEP = "keep"
REMOVE = "remove"


def pad_to_features(x: Dfm, features: List[str]) -> Dfm:
    """
    Return a Dfm whose features are exactly ``features``, in that order. Features of
    ``x`` not in ``features`` are dropped and those in ``features`` missing from
    ``x`` are added as all-zero columns. If ``x`` repeats a feature name, the
    first column with that name is used.

    Parameters
    ----------
    x : Dfm
        Dfm to pad and reorder
    features : List[str]
        The feature names of the result

    Returns
    -------
    Dfm
    """
    missing = []
    seen = set()
    for label in features:
        if label not in x.features and label not in seen:
            seen.add(label)
            missing.append(label)

    padded = x.view().zero_extend_columns(len(missing))
    index = LabelIndex(x.featnames + missing)
    values = padded.select_columns(index.positions_of(features))

    return Dfm(values, x.documents, features, x.meta, strict=False)


class DfmSelector:
    """
    Select or remove features of a Dfm by matching their names against patterns.

    Parameters
    ----------
    options : DfmOptions, optional
        Supplies the default verbosity. Default is DEFAULT_OPTIONS

    Attributes
    ----------
    options : DfmOptions
    """

    def __init__(self, options: DfmOptions = None):
        self.options = DEFAULT_OPTIONS if options is None else options

    def select(
        self,
        x: Dfm,
        pattern=None,
        selection: str = KEEP,
        valuetype: Union[str, ValueType] = ValueType.GLOB,
        case_insensitive: bool = True,
        min_nchar: int = 1,
        max_nchar: int = 79,
        verbose: bool = None,
    ) -> Dfm:
        """
        Keep or remove the features of ``x`` whose names match ``pattern``, then
        keep only the features whose names are between ``min_nchar`` and
        ``max_nchar`` characters long. Features keep their original order and the
        documents are never changed. Selecting everything away leaves a Dfm with
        the same documents and no features.

        When ``pattern`` is a Dfm, the result has exactly the features of that Dfm
        in the same order. Features of ``x`` not in the pattern Dfm are discarded,
        and features of the pattern Dfm not in ``x`` are added with all zero
        counts. In this case ``valuetype`` is always "fixed", ``case_insensitive``
        is always False, and the length limits are not applied.

        Parameters
        ----------
        x : Dfm
            Dfm whose features are selected
        pattern : None | str | Iterable[str] | Mapping | Dictionary | Dfm, optional
            Patterns to match against feature names. A Mapping (or Dictionary)
            supplies the entries of all of its groups, with the spaces inside
            multi-word entries replaced by the concatenator of ``x``. If None, all
            features are kept when ``selection`` is "keep" and none are removed
            when it is "remove". Default is None
        selection : str, optional
            Either "keep" or "remove". Default is "keep"
        valuetype : str | ValueType, optional
            One of "glob", "regex", or "fixed". Default is "glob"
        case_insensitive : bool, optional
            Ignore case when matching. Default is True
        min_nchar : int, optional
            Minimum length in characters of kept feature names. Default is 1
        max_nchar : int | None, optional
            Maximum length in characters of kept feature names. None for no upper
            limit. Default is 79
        verbose : bool, optional
            If True, log how many features were matched and removed. Default is
            ``options.verbose``

        Returns
        -------
        Dfm

        Raises
        ------
        TypeError
            If ``x`` is not a Dfm or ``pattern`` is of an unsupported type
        ValueError
            If ``selection`` or ``valuetype`` is not recognized
        PatternError
            If a regular expression does not compile
        """
        if not isinstance(x, Dfm):
            raise TypeError(f"x must be a Dfm. You gave {type(x)}")
        if selection not in (KEEP, REMOVE):
            raise ValueError(f"{selection=:} must be either 'keep' or 'remove'")
        valuetype = ValueType.parse(valuetype)
        if verbose is None:
            verbose = self.options.verbose

        pattern = resolve_pattern(pattern)
        padding = isinstance(pattern, ReferenceDfm)
        featnames = x.featnames

        if pattern is None:
            matched = list(range(x.nfeat)) if selection == KEEP else []
        else:
            if padding:
                valuetype = ValueType.FIXED
                case_insensitive = False
                patterns = pattern.patterns
            elif isinstance(pattern, Dictionary):
                patterns = pattern.entries(x.meta.concatenator)
            else:
                patterns = pattern.patterns
            matcher = PatternMatcher(valuetype, case_insensitive)
            matched = matcher.match_sorted(patterns, x.features)

        if selection == KEEP:
            keep = matched
        else:
            matched_set = set(matched)
            keep = [i for i in range(x.nfeat) if i not in matched_set]

        if not padding:
            keep = [
                i
                for i in keep
                if min_nchar <= len(featnames[i])
                and (max_nchar is None or len(featnames[i]) <= max_nchar)
            ]

        result = Dfm(
            x.view().select_columns(keep),
            x.documents,
            [featnames[i] for i in keep],
            x.meta,
            strict=False,
        )
        if padding:
            result = pad_to_features(result, pattern.patterns)

        if verbose:
            change = result.nfeat - x.nfeat
            logger.info(
                f"{selection} matched {len(matched)} features; "
                + f"{abs(change)} features {'added' if change > 0 else 'removed'}, "
                + f"{result.nfeat} of {x.nfeat} remain"
            )

        return result


def select_features(
    x: Dfm,
    pattern=None,
    selection: str = KEEP,
    valuetype: Union[str, ValueType] = ValueType.GLOB,
    case_insensitive: bool = True,
    min_nchar: int = 1,
    max_nchar: int = 79,
    verbose: bool = None,
    *,
    options: DfmOptions = None,
) -> Dfm:
    """
    Select features from a Dfm. See :meth:`DfmSelector.select`.

    Examples
    --------

    ::

        import numpy as np
        from docfeat import Dfm, select_features

        x = Dfm(np.eye(4), ["d1", "d2", "d3", "d4"], ["apple", "banana", "kiwi", "fig"])
        select_features(x, "*i*").featnames
        # ['kiwi', 'fig']
        select_features(x, "*i*", min_nchar=4).featnames
        # ['kiwi']
        select_features(x, ["apple", "fig"], selection="remove").featnames
        # ['banana', 'kiwi']

    """
    return DfmSelector(options).select(
        x,
        pattern,
        selection=selection,
        valuetype=valuetype,
        case_insensitive=case_insensitive,
        min_nchar=min_nchar,
        max_nchar=max_nchar,
        verbose=verbose,
    )


def keep_features(x: Dfm, pattern=None, **kwargs) -> Dfm:
    """
    Convenience wrapper for :func:`select_features` with ``selection="keep"``.
    """
    if "selection" in kwargs:
        raise TypeError("keep_features cannot include selection argument")
    return select_features(x, pattern, selection=KEEP, **kwargs)


def remove_features(x: Dfm, pattern=None, **kwargs) -> Dfm:
    """
    Convenience wrapper for :func:`select_features` with ``selection="remove"``.
    """
    if "selection" in kwargs:
        raise TypeError("remove_features cannot include selection argument")
    return select_features(x, pattern, selection=REMOVE, **kwargs)
