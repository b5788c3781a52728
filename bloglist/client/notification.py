"""
Bloglist — Notification Scheduler
==================================

What:  Shows a transient message through the store and clears it after a delay.
How:   show() dispatches SetNotification and schedules a ClearNotification
       with loop.call_later(). The pending TimerHandle is kept; showing a new
       message cancels the previous timer before scheduling its own. The
       clear carries the notification's token, so it can only ever remove the
       message it was scheduled for.

The reducer never schedules anything; all timing lives here.
"""

import asyncio
import itertools
import logging
from typing import Optional

from bloglist.client.store import ClearNotification, Notification, SetNotification, Store

logger = logging.getLogger(__name__)

DEFAULT_SECONDS = 5.0


class Notifier:
    """Owns the one pending clear-timer for a store's notification."""

    def __init__(self, store: Store, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._store = store
        self._loop = loop
        self._tokens = itertools.count(1)
        self._pending: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        """True while a clear is scheduled."""
        return self._pending is not None and not self._pending.cancelled()

    def show(self, text: str, seconds: float = DEFAULT_SECONDS, kind: str = "info") -> Notification:
        """
        Display `text` for `seconds`, replacing any current notification.

        Must be called with a running event loop unless one was given to the
        constructor.
        """
        if seconds < 0:
            raise ValueError("seconds must be non-negative")

        loop = self._loop or asyncio.get_running_loop()
        self.cancel()
        notification = Notification(text=text, kind=kind, token=next(self._tokens))
        self._store.dispatch(SetNotification(notification=notification))
        self._pending = loop.call_later(seconds, self._expire, notification.token)
        logger.debug("notification %d scheduled to clear in %.2fs", notification.token, seconds)
        return notification

    def cancel(self) -> None:
        """Cancel the pending clear, leaving the current message on screen."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def dismiss(self) -> None:
        """Cancel the pending clear and remove the message now."""
        self.cancel()
        self._store.dispatch(ClearNotification())

    def _expire(self, token: int) -> None:
        self._pending = None
        self._store.dispatch(ClearNotification(token=token))
