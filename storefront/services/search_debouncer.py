"""
Search debouncer.

Coalesces rapid search input into at most one outstanding timer. The
machine has two states:

- IDLE: no timer scheduled.
- PENDING: one timer scheduled. It carries the latest input value.

Each input event cancels the pending timer and schedules a new one. The
new deadline is the earlier of `window` after this event and `max_wait`
after the first event of the burst. When the timer fires, the machine
returns to IDLE and `on_fire` is called once with the latest value.

With max_wait equal to the window (the default), keystrokes at 0, 100,
200 and 600 ms against a 500 ms window produce two searches: one at
500 ms carrying the 200 ms value and one at 1100 ms carrying the 600 ms
value. Pass max_wait=math.inf for a purely trailing debounce.
"""

import logging
from collections.abc import Callable
from enum import Enum

from storefront.config import settings
from storefront.services.scheduler import AsyncioScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class DebounceState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class SearchDebouncer:
    """Two-state debounce machine with an injectable scheduler."""

    def __init__(
        self,
        on_fire: Callable[[str], None],
        window: float | None = None,
        max_wait: float | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        """
        Initialize the debouncer.

        Args:
            on_fire: Called with the latest input when the timer fires
            window: Quiet period in seconds. Defaults to settings.search_debounce_seconds.
            max_wait: Longest a burst may delay a search, measured from its
                first event. Defaults to the window; math.inf disables the cap.
            scheduler: Clock and timer source. Defaults to the running asyncio loop.
        """
        self.window = settings.search_debounce_seconds if window is None else window
        if self.window < 0:
            raise ValueError(f"Debounce window must be non-negative, got {self.window}")

        self.max_wait = self.window if max_wait is None else max_wait

        self._on_fire = on_fire
        self._scheduler: Scheduler = scheduler or AsyncioScheduler()
        self._timer: TimerHandle | None = None
        self._burst_started_at: float | None = None
        self._latest: str | None = None

    @property
    def state(self) -> DebounceState:
        return DebounceState.PENDING if self._timer is not None else DebounceState.IDLE

    @property
    def pending_query(self) -> str | None:
        """Value that will be searched when the pending timer fires."""
        return self._latest if self._timer is not None else None

    def submit(self, text: str) -> None:
        """Record an input event and (re)schedule the search."""
        now = self._scheduler.time()

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        else:
            self._burst_started_at = now

        started = now if self._burst_started_at is None else self._burst_started_at
        delay = min(self.window, started + self.max_wait - now)

        self._latest = text
        self._timer = self._scheduler.call_later(max(delay, 0.0), self._fire)

    def cancel(self) -> None:
        """Drop the pending timer without searching."""
        if self._timer is not None:
            self._timer.cancel()
        self._reset()

    def _fire(self) -> None:
        query = self._latest or ""
        self._reset()
        logger.debug("Debounce window elapsed, searching for %r", query)
        self._on_fire(query)

    def _reset(self) -> None:
        self._timer = None
        self._burst_started_at = None
        self._latest = None
