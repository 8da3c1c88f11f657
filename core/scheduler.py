"""
Notification scheduler.

Polls the wall clock once per second and fires a notification cycle when a
configured time of day (seconds since local midnight) is reached. Targets
crossed between two samples, e.g. while a slow cycle was running, are still
fired as long as the gap is small.
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from config import SECONDS_PER_DAY
from utils.formatting import seconds_to_time_string

logger = logging.getLogger(__name__)


def seconds_since_midnight(moment: datetime) -> int:
    """Second of the day for a (local) datetime."""
    return moment.hour * 3600 + moment.minute * 60 + moment.second


def is_notification_time(current_seconds: int, notification_times: Sequence[int]) -> bool:
    """True if the current second exactly matches a target."""
    return current_seconds in notification_times


def get_next_notification_time(current_seconds: int, notification_times: Sequence[int]) -> int:
    """
    Next target strictly after current_seconds.

    Wraps to the earliest target of the day when none is left today.
    """
    later = [t for t in notification_times if t > current_seconds]
    if later:
        return min(later)
    return min(notification_times)


def due_notification_times(
    previous: Optional[int],
    current: int,
    notification_times: Sequence[int],
    max_catchup_seconds: int = 60
) -> List[int]:
    """
    Targets inside the window (previous, current], wrapping at midnight.

    Without a previous sample, or when the gap exceeds max_catchup_seconds
    (clock change, suspend), only an exact match on current counts. Results
    are ordered by when they occurred within the window.
    """
    if previous is None:
        return [current] if is_notification_time(current, notification_times) else []

    elapsed = (current - previous) % SECONDS_PER_DAY
    if elapsed == 0:
        return []
    if elapsed > max_catchup_seconds:
        return [current] if is_notification_time(current, notification_times) else []

    due = {
        t for t in notification_times
        if 0 < (t - previous) % SECONDS_PER_DAY <= elapsed
    }
    return sorted(due, key=lambda t: (t - previous) % SECONDS_PER_DAY)


class NotificationScheduler:
    """
    Fires the notification callback at configured times of day.

    The clock is sampled fresh on every tick. Only the previous sample is
    kept, to detect targets skipped between ticks. At most one cycle runs
    per tick even if several targets were crossed.
    """

    def __init__(
        self,
        notification_times: Sequence[int],
        on_trigger: Callable[[], Awaitable[Any]],
        poll_interval: float = 1.0,
        max_catchup_seconds: int = 60,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize scheduler.

        Args:
            notification_times: Target seconds since local midnight (non-empty)
            on_trigger: Coroutine function running one notification cycle
            poll_interval: Seconds to sleep between ticks
            max_catchup_seconds: Largest gap for which skipped targets still fire
            clock: Returns the current local time
        """
        if not notification_times:
            raise ValueError("notification_times must not be empty")

        self.notification_times = list(notification_times)
        self.on_trigger = on_trigger
        self.poll_interval = poll_interval
        self.max_catchup_seconds = max_catchup_seconds
        self._clock = clock
        self._last_tick: Optional[int] = None
        self.running = False

    def next_notification_time(self) -> int:
        """Next target after the current clock time."""
        return get_next_notification_time(
            seconds_since_midnight(self._clock()), self.notification_times
        )

    def log_next_notification_time(self):
        logger.info(f"Next notification time: {seconds_to_time_string(self.next_notification_time())}")

    async def tick(self) -> bool:
        """
        Sample the clock once and run a cycle if a target is due.

        Returns:
            True if a notification cycle was triggered
        """
        current = seconds_since_midnight(self._clock())
        due = due_notification_times(
            self._last_tick, current, self.notification_times, self.max_catchup_seconds
        )
        self._last_tick = current

        if not due:
            return False

        if due != [current]:
            missed = ", ".join(seconds_to_time_string(t) for t in due)
            logger.warning(f"Catching up on notification time(s) passed between ticks: {missed}")

        logger.info("Notification time reached. Fetching funding rates...")
        try:
            await self.on_trigger()
        except Exception as e:
            # Keep the loop alive
            logger.error(f"Error during notification cycle: {e}", exc_info=True)

        self.log_next_notification_time()
        return True

    async def run_forever(self):
        """
        Run the scheduler loop until stop() is called or the task is cancelled.
        """
        self.running = True
        logger.info(f"Scheduler started (poll interval {self.poll_interval}s)")

        while self.running:
            await self.tick()
            await asyncio.sleep(self.poll_interval)

    def stop(self):
        """Stop the scheduler loop."""
        logger.info("Stopping scheduler...")
        self.running = False
