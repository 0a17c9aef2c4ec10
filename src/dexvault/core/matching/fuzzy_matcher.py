"""Tiered fuzzy name matching.

Each candidate name is tested against four tiers in order and takes the
priority of the first tier it satisfies:

1. substring: the query occurs anywhere in the name
2. prefix: the name starts with the query
3. multi-token: every query token prefixes, or is one edit away from,
   some name token ("mega charizard" finds "charizard-mega")
4. fallback: the query is an in-order subsequence of the name, or is
   within a small edit distance of part of it ("pikacu" finds "pikachu")

Results are ordered by priority, then by name length, and capped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from dexvault.core.matching.levenshtein import levenshtein, within_distance
from dexvault.shared.constants import SearchConfig
from dexvault.shared.errors import create_validation_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    """A matched name and the tier priority it matched at."""

    name: str
    priority: int


def normalize_query(query: str) -> str:
    return query.strip().lower()


def tokenize(text: str) -> list[str]:
    """Split on whitespace after turning ``-`` and ``_`` into spaces.

    Example:
        >>> tokenize("charizard-mega_x")
        ['charizard', 'mega', 'x']
    """
    for separator in SearchConfig.TOKEN_SEPARATORS:
        text = text.replace(separator, " ")
    return text.split()


def is_subsequence(query: str, name: str) -> bool:
    """True if the characters of ``query`` appear in ``name`` in order."""
    remaining = iter(name)
    return all(char in remaining for char in query)


def fuzzy_threshold(query: str) -> int:
    return 1 if len(query) < SearchConfig.LONG_QUERY_LENGTH else 2


def _tokens_match(query_tokens: list[str], name_tokens: list[str]) -> bool:
    for query_token in query_tokens:
        if not any(
            name_token.startswith(query_token)
            or within_distance(query_token, name_token, SearchConfig.TOKEN_MAX_DISTANCE)
            for name_token in name_tokens
        ):
            return False
    return True


def _near_match(query: str, name: str) -> bool:
    if len(query) < SearchConfig.MIN_FUZZY_QUERY_LENGTH:
        return False

    threshold = fuzzy_threshold(query)
    width = len(query)

    if len(name) >= width:
        # stepped windows trade recall for speed on long names
        step = max(1, width // 3)
        for start in range(0, len(name) - width + 1, step):
            if levenshtein(query, name[start : start + width], threshold) <= threshold:
                return True

    if levenshtein(query, name[: width + 1], threshold) <= threshold:
        return True

    if len(name) < width:
        return levenshtein(name, query[: len(name) + 1], threshold) <= threshold
    return False


def match_priority(query: str, name: str) -> int | None:
    """Priority of the first tier ``name`` satisfies for ``query``, else None.

    Both arguments are expected to be normalized already.
    """
    if query in name:
        return SearchConfig.PRIORITY_SUBSTRING
    if name.startswith(query):
        return SearchConfig.PRIORITY_PREFIX

    query_tokens = tokenize(query)
    name_tokens = tokenize(name)
    if query_tokens and (len(query_tokens) > 1 or len(name_tokens) > 1):
        if _tokens_match(query_tokens, name_tokens):
            return SearchConfig.PRIORITY_MULTI_TOKEN

    if is_subsequence(query, name) or _near_match(query, name):
        return SearchConfig.PRIORITY_FUZZY
    return None


class FuzzyMatcher:
    """Rank candidate names against a free-text query.

    Args:
        max_results: Maximum number of names returned
    """

    def __init__(self, max_results: int = SearchConfig.MAX_RESULTS) -> None:
        if max_results <= 0:
            raise create_validation_error(
                f"max_results must be positive, got: {max_results}",
                field="max_results",
                value=max_results,
            )
        self.max_results = max_results

    def rank(self, query: str, names: Iterable[str]) -> list[MatchResult]:
        """Return matches with their priorities, best first."""
        query = normalize_query(query)
        if not query:
            return []

        matches: list[MatchResult] = []
        strong = 0
        for name in names:
            priority = match_priority(query, name.lower())
            if priority is None:
                continue
            matches.append(MatchResult(name=name, priority=priority))
            if priority <= SearchConfig.PRIORITY_PREFIX:
                strong += 1
                if strong >= self.max_results:
                    logger.debug("Stopping scan after %d strong matches", strong)
                    break

        matches.sort(key=lambda m: (m.priority, len(m.name)))
        return matches[: self.max_results]

    def match(self, query: str, names: Iterable[str]) -> list[str]:
        """Return matching names, best first.

        Example:
            >>> FuzzyMatcher().match("char", ["scar", "charmander", "charizard"])
            ['charizard', 'charmander']
        """
        return [result.name for result in self.rank(query, names)]
