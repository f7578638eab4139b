"""
Panel refresh logic for the dashboard and reports views.

Each panel runs idle -> loading -> success | error. A panel in error retries
on a short fixed interval until it succeeds; otherwise panels re-fetch once an
hour, and only inside business hours. A manual refresh re-enters loading from
any state.
"""

import asyncio
import time
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar
from zoneinfo import ZoneInfo

from flashdash.config.settings import settings
from flashdash.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

HOURLY_CHECK_SECONDS = 60 * 60
ERROR_RETRY_SECONDS = 30
SYNC_STATUS_POLL_SECONDS = 60


def within_business_hours(
    moment: Optional[datetime] = None,
    tz_name: Optional[str] = None,
    start_hour: Optional[int] = None,
    end_hour: Optional[int] = None,
) -> bool:
    """True when `moment` (default: now) falls in [start, end) in the business timezone."""
    tz = ZoneInfo(tz_name or settings.BUSINESS_TIMEZONE)
    start = settings.BUSINESS_HOURS_START if start_hour is None else start_hour
    end = settings.BUSINESS_HOURS_END if end_hour is None else end_hour

    if moment is None:
        local = datetime.now(tz)
    elif moment.tzinfo is None:
        # Naive datetimes are taken as already local.
        local = moment
    else:
        local = moment.astimezone(tz)
    return start <= local.hour < end


class PanelStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class Panel(Generic[T]):
    """
    One async panel and its load state.

    `fetch` produces the panel's data; any exception it raises moves the panel
    to ERROR with the message kept in `error`.
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[], Awaitable[T]],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self._fetch = fetch
        self._clock = clock
        self.status = PanelStatus.IDLE
        self.data: Optional[T] = None
        self.error: Optional[str] = None
        self.last_attempt: Optional[float] = None
        self.last_success: Optional[float] = None

    async def refresh(self) -> PanelStatus:
        """Load now, whatever the current state."""
        self.status = PanelStatus.LOADING
        self.error = None
        self.last_attempt = self._clock()
        try:
            self.data = await self._fetch()
        except Exception as e:
            self.status = PanelStatus.ERROR
            self.error = str(e) or e.__class__.__name__
            logger.warning(f"Panel {self.name} failed to load: {self.error}")
        else:
            self.status = PanelStatus.SUCCESS
            self.last_success = self.last_attempt
        return self.status

    def retry_due(self, now: float, retry_interval: float = ERROR_RETRY_SECONDS) -> bool:
        return (
            self.status is PanelStatus.ERROR
            and self.last_attempt is not None
            and now - self.last_attempt >= retry_interval
        )


class RefreshScheduler:
    """
    Decides when a panel reloads.

    - first tick: load immediately
    - in error: retry every `retry_interval` seconds
    - otherwise: every `check_interval` seconds, reload only inside business hours
    """

    def __init__(
        self,
        panel: Panel[Any],
        check_interval: float = HOURLY_CHECK_SECONDS,
        retry_interval: float = ERROR_RETRY_SECONDS,
        in_business_hours: Callable[[], bool] = within_business_hours,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.panel = panel
        self.check_interval = check_interval
        self.retry_interval = retry_interval
        self._in_business_hours = in_business_hours
        self._clock = clock
        self._last_check: Optional[float] = None

    async def tick(self) -> bool:
        """Run one scheduling step. Returns True when a load was started."""
        now = self._clock()

        if self.panel.status is PanelStatus.IDLE:
            self._last_check = now
            await self.panel.refresh()
            return True

        if self.panel.retry_due(now, self.retry_interval):
            await self.panel.refresh()
            return True

        if self._last_check is None or now - self._last_check >= self.check_interval:
            self._last_check = now
            if self._in_business_hours():
                await self.panel.refresh()
                return True
        return False

    async def manual_refresh(self) -> PanelStatus:
        return await self.panel.refresh()

    async def run(self, stop: asyncio.Event, poll_seconds: float = 1.0) -> None:
        """Tick until `stop` is set."""
        while not stop.is_set():
            await self.tick()
            try:
                await asyncio.wait_for(stop.wait(), timeout=poll_seconds)
            except asyncio.TimeoutError:
                continue
