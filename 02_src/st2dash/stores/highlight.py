"""Highlight correlation set."""

from typing import Iterable

from ..models import correlation_key


class HighlightSet:
    """Append-only set of correlation keys; membership never shrinks."""

    def __init__(self) -> None:
        self._keys: set[str] = set()

    def add(self, key: str) -> None:
        self._keys.add(key)

    def update(self, pairs: Iterable[tuple[int, int]]) -> None:
        """Add the key of every (src, dst) pair."""
        for src, dst in pairs:
            self._keys.add(correlation_key(src, dst))

    def has(self, key: str) -> bool:
        return key in self._keys

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def is_empty(self) -> bool:
        return not self._keys

    def snapshot(self) -> frozenset[str]:
        return frozenset(self._keys)
