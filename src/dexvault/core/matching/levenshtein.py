"""Bounded Levenshtein edit distance."""

from __future__ import annotations


def levenshtein(a: str, b: str, threshold: int | None = None) -> int:
    """Return the edit distance between ``a`` and ``b``.

    Uses two rows sized by the shorter string. With a ``threshold`` the
    computation stops as soon as the distance is known to exceed it and
    ``threshold + 1`` is returned instead of the exact value, so callers
    can only rely on results up to the threshold.

    Example:
        >>> levenshtein("kitten", "sitting")
        3
        >>> levenshtein("abc", "xyz", threshold=1)
        2
    """
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    # b is now the shorter string and sizes the rows
    if threshold is not None:
        if threshold < 0:
            raise ValueError(f"threshold must not be negative, got: {threshold}")
        if len(a) - len(b) > threshold:
            return threshold + 1
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    current = [0] * (len(b) + 1)
    for i, char_a in enumerate(a, start=1):
        current[0] = i
        row_min = i
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            value = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
            current[j] = value
            if value < row_min:
                row_min = value
        if threshold is not None and row_min > threshold:
            return threshold + 1
        previous, current = current, previous

    distance = previous[len(b)]
    if threshold is not None and distance > threshold:
        return threshold + 1
    return distance


def within_distance(a: str, b: str, max_distance: int) -> bool:
    return levenshtein(a, b, max_distance) <= max_distance
