"""Bookkeeping of processed sources keyed by (source, settings_hash)."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass


@dataclass(frozen=True)
class CrossfadePair:
    """The two renditions of a processed image."""

    original_src: str
    dithered_src: str  # data URL of the stencil
    alt: str = ""


class ProcessedRegistry:
    """Maps each processed source to its original/dithered pair.

    Keys are (source, settings_hash) tuples, so the same source dithered
    with different settings is tracked separately. Entries stay in
    insertion order.
    """

    def __init__(self) -> None:
        self._entries: OrderedDict[tuple[str, str], CrossfadePair] = OrderedDict()

    def get(self, source: str, settings_hash: str) -> CrossfadePair | None:
        """Get the pair for a source, or None if it hasn't been processed."""
        return self._entries.get((source, settings_hash))

    def put(self, source: str, settings_hash: str, pair: CrossfadePair) -> None:
        """Record (or replace) the pair for a source."""
        self._entries[(source, settings_hash)] = pair

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._entries

    def clear(self) -> None:
        """Forget every processed source."""
        self._entries.clear()

    @property
    def size(self) -> int:
        return len(self._entries)
