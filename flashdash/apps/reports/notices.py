"""
Transient notices.

Two single-slot channels, each auto-dismissed after a fixed time:
- the fallback notice ("Cached data displayed") raised by fallback responses
- the request status ribbon (success / error / info) raised by requests
A newer notice replaces the one in its channel.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

FALLBACK_DISPLAY_SECONDS = 5.0
STATUS_DISPLAY_SECONDS = 4.5
DEFAULT_FALLBACK_MESSAGE = "Cached data displayed"

STATUS_KINDS = ("success", "error", "info")


@dataclass(frozen=True)
class Notice:
    kind: str
    message: str
    expires_at: float

    def visible(self, now: float) -> bool:
        return now < self.expires_at


class NoticeBoard:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._fallback: Optional[Notice] = None
        self._ribbon: Optional[Notice] = None

    def push_fallback(self, message: Optional[str] = None) -> Notice:
        self._fallback = Notice(
            kind="fallback",
            message=message or DEFAULT_FALLBACK_MESSAGE,
            expires_at=self._clock() + FALLBACK_DISPLAY_SECONDS,
        )
        return self._fallback

    def push_status(self, kind: str, message: Optional[str] = None) -> Notice:
        """Unknown kinds are shown as info."""
        self._ribbon = Notice(
            kind=kind if kind in STATUS_KINDS else "info",
            message=message or "Request processed",
            expires_at=self._clock() + STATUS_DISPLAY_SECONDS,
        )
        return self._ribbon

    def fallback_notice(self, now: Optional[float] = None) -> Optional[Notice]:
        now = self._clock() if now is None else now
        if self._fallback and self._fallback.visible(now):
            return self._fallback
        return None

    def status_ribbon(self, now: Optional[float] = None) -> Optional[Notice]:
        now = self._clock() if now is None else now
        if self._ribbon and self._ribbon.visible(now):
            return self._ribbon
        return None
