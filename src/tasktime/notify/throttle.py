# src/tasktime/notify/throttle.py

from __future__ import annotations

import logging
from datetime import datetime

from .quiet_hours import QuietHours

logger = logging.getLogger(__name__)


class NotificationThrottle:
    """
    Per-category rate limit plus quiet-hours gate.

    State is the in-memory map category -> last fired time, owned by this object
    and scoped to one process. A notification suppressed by quiet hours still
    updates last-fired, so quiet hours ending does not release a burst.
    """

    def __init__(self, threshold_seconds: float = 30.0, quiet_hours: QuietHours | None = None) -> None:
        self.threshold_seconds = float(threshold_seconds)
        self.quiet_hours = quiet_hours
        self._last_fired: dict[str, datetime] = {}

    def last_fired(self, category: str) -> datetime | None:
        return self._last_fired.get(category)

    def should_notify(self, category: str, now: datetime) -> bool:
        last = self._last_fired.get(category)
        if last is not None and (now - last).total_seconds() < self.threshold_seconds:
            logger.debug("Notification %r throttled (last fired %s)", category, last)
            return False

        self._last_fired[category] = now

        if self.quiet_hours is not None and self.quiet_hours.contains(now):
            logger.debug("Notification %r suppressed by quiet hours", category)
            return False
        return True
