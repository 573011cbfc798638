"""Workout result and display models.

These are the values that leave the core: the finished record handed to the
host for persistence and the display snapshot polled by the UI.
"""

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict

from beactive.workouts.catalog import ActivityDefinition, ChannelKind
from beactive.workouts.states import SessionState


class FinishedWorkoutRecord(BaseModel):
    """Completed workout ready to be saved by the host.

    Attributes:
        activity: Activity the session tracked
        start_time: Session start
        end_time: Time end() was called
        totals: Final value for every channel opened at start (0.0 if no samples arrived)
        active_duration: Elapsed time excluding pauses
        paused_duration: Total time spent paused
    """

    model_config = ConfigDict(frozen=True)

    activity: ActivityDefinition
    start_time: datetime
    end_time: datetime
    totals: dict[ChannelKind, float]
    active_duration: timedelta
    paused_duration: timedelta

    def total(self, channel: ChannelKind) -> float | None:
        """Total for a channel, or None if it was not tracked."""
        return self.totals.get(channel)


class WorkoutDisplay(BaseModel):
    """Values the workout screen shows on each refresh."""

    activity_name: str
    state: SessionState
    heart_rate: float
    active_energy: float
    distance: float | None = None  # None when the activity has no distance channel
    elapsed: timedelta
