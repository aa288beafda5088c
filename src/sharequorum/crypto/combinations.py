"""
Lexicographic enumeration of k-element index subsets.
"""

from math import comb
from typing import Iterator


def combinations(n: int, k: int) -> Iterator[tuple[int, ...]]:
    """
    Yield every k-subset of range(n) as a strictly increasing tuple.

    Subsets come out in lexicographic order (the first index varies
    slowest), each exactly once. The index array is advanced like an
    odometer, so there is no recursion and only O(k) state.

    Nothing is yielded when k <= 0 or k > n; the caller is expected to
    reject those thresholds before enumerating.

    Example:
        >>> list(combinations(4, 2))
        [(0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)]
    """
    if k <= 0 or k > n:
        return

    idx = list(range(k))
    while True:
        yield tuple(idx)

        # Rightmost position that can still move: idx[i] has a ceiling of
        # n - k + i, since k - 1 - i larger indices must fit after it.
        i = k - 1
        while i >= 0 and idx[i] == n - k + i:
            i -= 1
        if i < 0:
            return

        idx[i] += 1
        for j in range(i + 1, k):
            idx[j] = idx[j - 1] + 1


def count_combinations(n: int, k: int) -> int:
    """Number of subsets combinations(n, k) yields."""
    if k <= 0 or k > n:
        return 0
    return comb(n, k)
