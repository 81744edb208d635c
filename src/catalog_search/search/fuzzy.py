"""Edit-distance helpers for typo-tolerant term lookup."""

from __future__ import annotations

from collections.abc import Iterable


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return ``max_distance + 1`` as soon as the
            distance is guaranteed to exceed this threshold.

    Returns:
        The minimum number of single-character insertions, deletions or
        substitutions needed to change ``s1`` into ``s2``, capped at
        ``max_distance + 1`` when a bound is given.

    Examples:
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("testtitel", "testtitle")
        2
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Use shorter string as columns for space efficiency
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)
    if max_distance is not None and n - m > max_distance:
        return max_distance + 1

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = j
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
            row_min = min(row_min, curr_row[i])

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def find_fuzzy_matches(term: str, vocabulary: Iterable[str], max_distance: int) -> list[tuple[str, int]]:
    """Return ``(vocabulary_term, distance)`` pairs within ``max_distance`` of ``term``.

    Results are ordered by distance, then alphabetically. ``max_distance`` of
    zero degrades to an exact lookup.
    """
    if not term or max_distance < 0:
        return []

    matches: list[tuple[str, int]] = []
    for candidate in vocabulary:
        if abs(len(candidate) - len(term)) > max_distance:
            continue
        distance = levenshtein_distance(term, candidate, max_distance)
        if distance <= max_distance:
            matches.append((candidate, distance))

    matches.sort(key=lambda item: (item[1], item[0]))
    return matches
