"""Pause-aware elapsed time for the workout timer display.

elapsed(now) = (now - start) - accumulated pauses - (now - pause start, while paused)
"""

from datetime import datetime, timedelta


class PauseClock:
    """Active workout time, excluding paused intervals.

    The clock starts running at construction. pause() and resume() are
    no-ops (returning False) when the clock is already in the target state.
    """

    def __init__(self, start_time: datetime):
        self.start_time = start_time
        self.pause_start_time: datetime | None = None
        self.accumulated_pause = timedelta(0)

    @property
    def is_paused(self) -> bool:
        return self.pause_start_time is not None

    def pause(self, now: datetime) -> bool:
        if self.is_paused:
            return False
        self.pause_start_time = now
        return True

    def resume(self, now: datetime) -> bool:
        if self.pause_start_time is None:
            return False
        self.accumulated_pause += now - self.pause_start_time
        self.pause_start_time = None
        return True

    def paused_duration(self, now: datetime) -> timedelta:
        """Total paused time up to ``now``, including an open pause."""
        if self.pause_start_time is None:
            return self.accumulated_pause
        return self.accumulated_pause + (now - self.pause_start_time)

    def elapsed(self, now: datetime) -> timedelta:
        return (now - self.start_time) - self.paused_duration(now)
