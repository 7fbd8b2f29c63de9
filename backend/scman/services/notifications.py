"""
Short-lived per-user notifications ("toasts").

Each user has a queue of messages that disappear on their own after a
duration, or earlier when dismissed. Expired entries are filtered out on
read and dropped for good by purge_expired(), which the application runs
on a timer.
"""
from dataclasses import dataclass, asdict
from typing import Callable, Dict, List
import asyncio
import itertools
import logging
import threading
import time

from scman.core.config import settings

logger = logging.getLogger(__name__)

NOTIFICATION_KINDS = ("info", "error")


@dataclass
class Notification:
    id: int
    message: str
    kind: str
    duration: float
    created_at: float
    expires_at: float

    def to_dict(self) -> dict:
        return asdict(self)


class NotificationCenter:
    def __init__(self, clock: Callable[[], float] = time.time, default_duration: float = None):
        self._clock = clock
        if default_duration is None:
            default_duration = settings.NOTIFICATION_DURATION_SECONDS
        self._default_duration = default_duration
        self._ids = itertools.count()
        self._queues: Dict[int, List[Notification]] = {}
        self._lock = threading.Lock()

    def push(self, user_id: int, message: str, kind: str = "info", duration: float = None) -> Notification:
        if kind not in NOTIFICATION_KINDS:
            raise ValueError(f"Unknown notification kind: {kind}")

        now = self._clock()
        duration = self._default_duration if duration is None else duration
        with self._lock:
            notification = Notification(
                id=next(self._ids),
                message=message,
                kind=kind,
                duration=duration,
                created_at=now,
                expires_at=now + duration,
            )
            self._queues.setdefault(user_id, []).append(notification)
        return notification

    def pending(self, user_id: int) -> List[Notification]:
        """Unexpired notifications for the user, oldest first"""
        now = self._clock()
        with self._lock:
            return [n for n in self._queues.get(user_id, []) if n.expires_at > now]

    def dismiss(self, user_id: int, notification_id: int) -> bool:
        with self._lock:
            queue = self._queues.get(user_id, [])
            for index, notification in enumerate(queue):
                if notification.id == notification_id:
                    del queue[index]
                    return True
        return False

    def purge_expired(self) -> int:
        now = self._clock()
        removed = 0
        with self._lock:
            for user_id in list(self._queues):
                queue = self._queues[user_id]
                kept = [n for n in queue if n.expires_at > now]
                removed += len(queue) - len(kept)
                if kept:
                    self._queues[user_id] = kept
                else:
                    del self._queues[user_id]
        if removed:
            logger.debug(f"Purged {removed} expired notifications")
        return removed

    async def run_purger(self, interval: float = None):
        """Purge expired notifications every interval seconds until cancelled"""
        interval = interval or settings.NOTIFICATION_PURGE_INTERVAL_SECONDS
        while True:
            await asyncio.sleep(interval)
            self.purge_expired()


# Singleton instance
notification_center = NotificationCenter()
