"""In-process SessionHost that records calls and replays sample batches.

Used by the test suite and for running the core without a watch: batches
are pushed with ``deliver`` and reach the session through the callback it
registered when the subscription was opened.
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock

from loguru import logger

from beactive.host.contracts import CompletionCallback, SampleDelivery
from beactive.metrics.accumulator import Sample
from beactive.workouts.catalog import ActivityDefinition, ActivityKind, ChannelKind
from beactive.workouts.errors import HostSessionError
from beactive.workouts.models import FinishedWorkoutRecord


@dataclass
class Subscription:
    """An open (or closed) simulated query."""

    handle: int
    channel: ChannelKind
    since: datetime
    deliver: SampleDelivery
    closed: bool = False


@dataclass
class SimulatedSessionHost:
    """Deterministic host: authorization, tracking and persistence answers are preset.

    Attributes:
        health_data_available: Answer for is_health_data_available()
        authorize: Result passed to authorization callbacks
        unsupported_kinds: Activity kinds start_tracking refuses
        persist_succeeds: Result passed to persistence callbacks
        answer_immediately: Invoke callbacks inside the request call; when False
            they queue until complete_pending() is called
    """

    health_data_available: bool = True
    authorize: bool = True
    unsupported_kinds: frozenset[ActivityKind] = frozenset()
    persist_succeeds: bool = True
    answer_immediately: bool = True

    subscriptions: list[Subscription] = field(default_factory=list)
    closed_handles: list[int] = field(default_factory=list)
    authorization_requests: list[tuple[frozenset[ChannelKind], frozenset[ChannelKind]]] = field(default_factory=list)
    tracking_started: list[tuple[ActivityDefinition, datetime]] = field(default_factory=list)
    tracking_stopped: list[datetime] = field(default_factory=list)
    saved_records: list[FinishedWorkoutRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._handles = itertools.count(1)
        self._pending: list[tuple[CompletionCallback, bool]] = []
        self._lock = Lock()

    def is_health_data_available(self) -> bool:
        return self.health_data_available

    def request_authorization(
        self,
        read_channels: frozenset[ChannelKind],
        write_channels: frozenset[ChannelKind],
        on_complete: CompletionCallback,
    ) -> None:
        self.authorization_requests.append((frozenset(read_channels), frozenset(write_channels)))
        self._answer(on_complete, self.authorize)

    def start_tracking(self, activity: ActivityDefinition, start_time: datetime) -> None:
        if activity.kind in self.unsupported_kinds:
            raise HostSessionError(f"{activity.kind} workouts are not supported on this device")
        self.tracking_started.append((activity, start_time))

    def stop_tracking(self, end_time: datetime) -> None:
        self.tracking_stopped.append(end_time)

    def open_subscription(self, channel: ChannelKind, since: datetime, deliver: SampleDelivery) -> int:
        with self._lock:
            handle = next(self._handles)
            self.subscriptions.append(Subscription(handle, channel, since, deliver))
        logger.debug(f"Simulated subscription {handle} opened for {channel}")
        return handle

    def close_subscription(self, handle: int) -> None:
        with self._lock:
            subscription = self._find(handle)
            if subscription is None:
                raise KeyError(f"Unknown subscription handle: {handle}")
            subscription.closed = True
            self.closed_handles.append(handle)

    def persist(self, record: FinishedWorkoutRecord, on_complete: CompletionCallback) -> None:
        if self.persist_succeeds:
            self.saved_records.append(record)
        self._answer(on_complete, self.persist_succeeds)

    def deliver(self, channel: ChannelKind, samples: Sequence[Sample | tuple[float, datetime]]) -> int:
        """Push a batch to every open subscription for ``channel``.

        Returns:
            Number of subscriptions the batch was delivered to
        """
        with self._lock:
            targets = [s for s in self.subscriptions if s.channel == channel and not s.closed]
        batch = [Sample(float(value), timestamp) for value, timestamp in samples]
        for subscription in targets:
            subscription.deliver(channel, batch)
        return len(targets)

    def open_channels(self) -> set[ChannelKind]:
        return {s.channel for s in self.subscriptions if not s.closed}

    def complete_pending(self) -> int:
        """Answer every queued callback, oldest first."""
        pending, self._pending = self._pending, []
        for callback, result in pending:
            callback(result)
        return len(pending)

    def _answer(self, callback: CompletionCallback, result: bool) -> None:
        if self.answer_immediately:
            callback(result)
        else:
            self._pending.append((callback, result))

    def _find(self, handle: int) -> Subscription | None:
        for subscription in self.subscriptions:
            if subscription.handle == handle:
                return subscription
        return None
