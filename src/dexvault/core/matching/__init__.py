"""Name matching: bounded edit distance and tiered fuzzy search."""

from .fuzzy_matcher import FuzzyMatcher, MatchResult, match_priority, tokenize
from .levenshtein import levenshtein, within_distance

__all__ = [
    "FuzzyMatcher",
    "MatchResult",
    "levenshtein",
    "match_priority",
    "tokenize",
    "within_distance",
]
