"""User notification channel.

Notifications are fire-and-forget: producers call ``notify`` and never
consume a return value. The logging sink always records them; the feed keeps
them until a client drains it.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

logger = logging.getLogger(__name__)


class Severity(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    """A single user-facing message."""

    title: str
    body: str
    severity: Severity = Severity.INFO


class Notifier(Protocol):
    """Protocol for anything that accepts notifications."""

    def notify(self, notification: Notification) -> None:
        """Deliver a notification. Must not raise."""
        ...


class LoggingNotifier:
    """Writes notifications to the log."""

    def notify(self, notification: Notification) -> None:
        level = logging.WARNING if notification.severity == Severity.DESTRUCTIVE else logging.INFO
        logger.log(level, "%s: %s", notification.title, notification.body)


class NotificationFeed:
    """Buffers notifications for a client to pick up.

    The buffer is bounded; the oldest pending notifications are dropped once
    ``maxlen`` is reached.
    """

    def __init__(self, maxlen: int = 100, *, sink: Notifier | None = None) -> None:
        self._pending: deque[Notification] = deque(maxlen=maxlen)
        self._lock = threading.Lock()
        self._sink = sink

    def notify(self, notification: Notification) -> None:
        with self._lock:
            self._pending.append(notification)
        if self._sink is not None:
            self._sink.notify(notification)

    def drain(self) -> list[Notification]:
        """Return and clear all pending notifications, oldest first."""
        with self._lock:
            items = list(self._pending)
            self._pending.clear()
        return items

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
