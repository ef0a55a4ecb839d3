"""Append-only record of successful classifications."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True)
class HistoryEntry:
    """One successful classification: image reference and display label."""

    image: str
    prediction: str


class HistoryLedger:
    """Ordered, append-only history for the lifetime of a session.

    Unbounded unless ``limit`` is given, in which case the oldest entries are
    evicted first.
    """

    def __init__(self, limit: int | None = None) -> None:
        self._entries: deque[HistoryEntry] = deque(maxlen=limit)

    @property
    def limit(self) -> int | None:
        return self._entries.maxlen

    def append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    def all(self) -> tuple[HistoryEntry, ...]:
        """Return entries oldest first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
