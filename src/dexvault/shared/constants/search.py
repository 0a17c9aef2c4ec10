"""
Search, navigation and preload constants.
"""

from typing import ClassVar


class SearchConfig:
    """Fuzzy search defaults."""

    MAX_RESULTS = 100
    DEBOUNCE_SECONDS = 0.25
    SUGGESTION_LIMIT = 10

    # Tier priorities, lower ranks first
    PRIORITY_SUBSTRING = 1
    PRIORITY_PREFIX = 2
    PRIORITY_MULTI_TOKEN = 3
    PRIORITY_FUZZY = 4

    # Edit distance allowed between a query token and a name token
    TOKEN_MAX_DISTANCE = 1

    # Queries shorter than this skip the edit-distance fallback
    MIN_FUZZY_QUERY_LENGTH = 3

    # Longer queries tolerate two typos in the fallback tier
    LONG_QUERY_LENGTH = 6

    TOKEN_SEPARATORS: ClassVar[tuple[str, ...]] = ("-", "_")


class Navigation:
    """D-pad style navigation over the name index order."""

    DEFAULT_ID = 1
    MAX_PRELOAD = 3
    ROW_STEP = 10
    STEPS: ClassVar[dict[str, int]] = {
        "left": -1,
        "right": 1,
        "up": -10,
        "down": 10,
    }


class StarterPokemon:
    """Popular ids picked when a session opens."""

    IDS: ClassVar[tuple[int, ...]] = (
        1, 2, 3,
        4, 5, 6,
        7, 8, 9,
        25, 26,
        129, 130,
        150, 151,
    )
