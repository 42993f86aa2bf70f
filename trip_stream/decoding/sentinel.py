"""Incremental sentinel matching over a stream of text fragments.

Uses the Knuth-Morris-Pratt failure function so that a delimiter split
across any number of fragments is found in time linear in the total
input, without rescanning text that was already seen.
"""

from __future__ import annotations

from typing import Optional


def failure_function(pattern: str) -> list[int]:
    """Return the KMP failure table of ``pattern``.

    ``table[i]`` is the length of the longest proper prefix of
    ``pattern[: i + 1]`` that is also a suffix of it.
    """
    table = [0] * len(pattern)
    k = 0
    for i in range(1, len(pattern)):
        while k > 0 and pattern[i] != pattern[k]:
            k = table[k - 1]
        if pattern[i] == pattern[k]:
            k += 1
        table[i] = k
    return table


class SentinelMatcher:
    """Tracks a partial match of a literal sentinel across fragments.

    Example:
        matcher = SentinelMatcher("---JSON_DATA---")
        matcher.scan("Day 2\\n---JSO")   # None, pending == 6
        matcher.scan("N_DATA---{")       # 9, matched
    """

    def __init__(self, sentinel: str) -> None:
        if not sentinel:
            raise ValueError("Sentinel must be a non-empty string")
        self._sentinel = sentinel
        self._table = failure_function(sentinel)
        self._k = 0
        self._matched = False

    @property
    def sentinel(self) -> str:
        return self._sentinel

    @property
    def matched(self) -> bool:
        """True once a complete occurrence has been scanned."""
        return self._matched

    @property
    def pending(self) -> int:
        """Trailing scanned characters that may still start the sentinel.

        These characters must be withheld from the narrative until later
        input confirms or rules out a match.
        """
        return 0 if self._matched else self._k

    def scan(self, text: str) -> Optional[int]:
        """Advance the automaton over ``text``.

        Returns:
            The index in ``text`` just past the first complete match, or
            None if the sentinel is not completed within ``text``. Once a
            match has been found, further calls return None without
            scanning.
        """
        if self._matched:
            return None

        sentinel, table = self._sentinel, self._table
        length = len(sentinel)
        k = self._k
        for i, ch in enumerate(text):
            while k > 0 and ch != sentinel[k]:
                k = table[k - 1]
            if ch == sentinel[k]:
                k += 1
                if k == length:
                    self._k = k
                    self._matched = True
                    return i + 1
        self._k = k
        return None

    def reset(self) -> None:
        self._k = 0
        self._matched = False
