"""Collaborator contract between the workout core and the host platform.

The host owns the sensor query engine, the health-data permission dialog,
the hardware workout session and the workout store. Every call is
fire-and-forget; results come back through the callbacks passed in.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from beactive.metrics.accumulator import Sample
from beactive.workouts.catalog import ActivityDefinition, ChannelKind

if TYPE_CHECKING:
    from beactive.workouts.models import FinishedWorkoutRecord

SubscriptionHandle = Any
SampleDelivery = Callable[[ChannelKind, Sequence[Sample]], None]
CompletionCallback = Callable[[bool], None]


class SessionHost(Protocol):
    """Protocol for the host platform services used by a workout session."""

    def is_health_data_available(self) -> bool:
        """Whether this device can read and write health data at all."""
        ...

    def request_authorization(
        self,
        read_channels: frozenset[ChannelKind],
        write_channels: frozenset[ChannelKind],
        on_complete: CompletionCallback,
    ) -> None:
        ...

    def start_tracking(self, activity: ActivityDefinition, start_time: datetime) -> None:
        """Create the hardware workout session.

        Raises:
            HostSessionError: If the session cannot be created
        """
        ...

    def stop_tracking(self, end_time: datetime) -> None:
        ...

    def open_subscription(self, channel: ChannelKind, since: datetime, deliver: SampleDelivery) -> SubscriptionHandle:
        """Start streaming sample batches for ``channel`` into ``deliver``."""
        ...

    def close_subscription(self, handle: SubscriptionHandle) -> None:
        ...

    def persist(self, record: FinishedWorkoutRecord, on_complete: CompletionCallback) -> None:
        ...
