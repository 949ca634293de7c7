# src/tasktime/notify/notifier.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from ..core.ports import NotificationTransport
from .throttle import NotificationThrottle

logger = logging.getLogger(__name__)


class Notifier:
    """
    Decides whether a notification goes out (throttle + quiet hours) and fans it
    out to every configured transport.

    Delivery is best-effort: a failing transport is logged and the others still run.
    """

    def __init__(
        self,
        throttle: NotificationThrottle,
        transports: Sequence[NotificationTransport] = (),
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.throttle = throttle
        self.transports = list(transports)
        self._clock = clock

    def notify(self, category: str, title: str, body: str, *, now: datetime | None = None) -> bool:
        """Returns True if the notification passed the throttle and quiet-hours gate."""
        ts = self._clock() if now is None else now
        if not self.throttle.should_notify(category, ts):
            return False

        if not self.transports:
            logger.debug("Notification %r allowed but no transports configured", category)

        for transport in self.transports:
            try:
                transport.send(title, body)
            except Exception:
                logger.exception("Notification via %s failed (category=%s)", transport.name, category)
        return True
