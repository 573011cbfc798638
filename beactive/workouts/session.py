"""Workout session state machine.

NotStarted -> Running <-> Paused -> Ended (terminal)

A WorkoutSession is mutated from two sides: transition calls from the UI and
sample batches delivered by the host on its own threads. Every mutation and
read runs under the session lock, so a pause can never interleave with an
in-flight ingest.

Subscriptions stay open across pause/resume; samples that arrive while the
session is not running are dropped. They are closed exactly once, in end()
or when start() fails partway.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from threading import RLock

from loguru import logger

from beactive.config.settings import settings
from beactive.host.contracts import SessionHost, SubscriptionHandle
from beactive.metrics.accumulator import MetricAccumulator, Sample
from beactive.metrics.pause_clock import PauseClock
from beactive.workouts.catalog import ActivityDefinition, ChannelKind, tracked_channels
from beactive.workouts.errors import HostSessionError, InvalidTransitionError, SessionUnavailableError
from beactive.workouts.models import FinishedWorkoutRecord
from beactive.workouts.states import SessionState


class WorkoutSession:
    """One workout tracking lifecycle for one activity.

    The session exclusively owns its MetricAccumulator and PauseClock. Both
    are created by start(); before that the session reports zero values.
    """

    def __init__(self, host: SessionHost, persist_on_end: bool | None = None):
        """Initialize a not-started session.

        Args:
            host: Platform collaborator for subscriptions, tracking and persistence
            persist_on_end: Save the record through the host in end().
                Defaults to settings.persist_on_end.
        """
        self._host = host
        self._persist_on_end = settings.persist_on_end if persist_on_end is None else persist_on_end
        self._lock = RLock()
        self._state = SessionState.NOT_STARTED
        self._activity: ActivityDefinition | None = None
        self._accumulator = MetricAccumulator()
        self._clock: PauseClock | None = None
        self._subscriptions: dict[ChannelKind, SubscriptionHandle] = {}
        self._open_channels: frozenset[ChannelKind] = frozenset()
        self._end_time: datetime | None = None
        self._record: FinishedWorkoutRecord | None = None
        self._persisted: bool | None = None

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def activity(self) -> ActivityDefinition | None:
        with self._lock:
            return self._activity

    @property
    def open_channels(self) -> frozenset[ChannelKind]:
        """Channels subscribed at start; kept after end for the summary."""
        with self._lock:
            return self._open_channels

    @property
    def record(self) -> FinishedWorkoutRecord | None:
        with self._lock:
            return self._record

    @property
    def persisted(self) -> bool | None:
        """Host answer to the save request, None until it arrives (or if never saved)."""
        with self._lock:
            return self._persisted

    def start(self, activity: ActivityDefinition, now: datetime) -> None:
        """Start tracking ``activity`` at ``now`` and open its subscriptions.

        Raises:
            InvalidTransitionError: If the session was already started
            SessionUnavailableError: If the host cannot create the tracking session.
                The session stays not started and start() may be retried.

        A failure while opening subscriptions closes the ones already opened,
        stops tracking and re-raises; the session stays not started.
        """
        with self._lock:
            self._require("start", SessionState.NOT_STARTED)

            try:
                self._host.start_tracking(activity, now)
            except HostSessionError as e:
                logger.error(f"Host could not start tracking {activity.name}: {e}")
                raise SessionUnavailableError(str(e)) from e

            self._activity = activity
            self._accumulator = MetricAccumulator()
            self._clock = PauseClock(now)
            self._state = SessionState.RUNNING

            channels = tracked_channels(activity)
            self._open_channels = frozenset(channels)
            try:
                for channel in channels:
                    self._subscriptions[channel] = self._host.open_subscription(channel, now, self.ingest)
            except Exception:
                logger.exception(f"Opening subscriptions failed for {activity.name}, rolling back start")
                self._rollback_start(now)
                raise

            logger.info(f"Workout started: activity={activity.name} channels={[str(c) for c in channels]}")

    def pause(self, now: datetime) -> None:
        with self._lock:
            self._require("pause", SessionState.RUNNING)
            self._clock.pause(now)
            self._state = SessionState.PAUSED
            logger.info(f"Workout paused: activity={self._activity.name}")

    def resume(self, now: datetime) -> None:
        with self._lock:
            self._require("resume", SessionState.PAUSED)
            self._clock.resume(now)
            self._state = SessionState.RUNNING
            logger.info(f"Workout resumed: activity={self._activity.name}")

    def ingest(self, channel: ChannelKind, samples: Sequence[Sample | tuple[float, datetime]]) -> None:
        """Merge a host sample batch; dropped unless running and subscribed."""
        with self._lock:
            if self._state != SessionState.RUNNING:
                logger.debug(f"Dropped {len(samples)} {channel} sample(s) while {self._state}")
                return
            if channel not in self._open_channels:
                logger.debug(f"Dropped {len(samples)} sample(s) for unsubscribed channel {channel}")
                return
            self._accumulator.ingest(channel, samples)

    def end(self, now: datetime) -> FinishedWorkoutRecord:
        """Finish the workout, close subscriptions and build the record.

        When persistence is enabled the record is also handed to the host;
        the host's answer is exposed as ``persisted``.

        Raises:
            InvalidTransitionError: If the session is not running or paused
        """
        with self._lock:
            self._require("end", SessionState.RUNNING, SessionState.PAUSED)
            self._state = SessionState.ENDED
            self._end_time = now

            record = FinishedWorkoutRecord(
                activity=self._activity,
                start_time=self._clock.start_time,
                end_time=now,
                totals=self._accumulator.snapshot(tracked_channels(self._activity)),
                active_duration=self._clock.elapsed(now),
                paused_duration=self._clock.paused_duration(now),
            )
            self._record = record

            self._release_host_resources(now)

            totals = ", ".join(f"{channel}={value:g}" for channel, value in record.totals.items())
            logger.info(f"Workout ended: activity={self._activity.name} active={record.active_duration} totals=[{totals}]")

            if self._persist_on_end:
                self._host.persist(record, self._on_persisted)
            return record

    def display_value(self, channel: ChannelKind) -> float:
        with self._lock:
            return self._accumulator.value(channel)

    def elapsed_display(self, now: datetime) -> timedelta:
        """Active elapsed time; frozen at the end time once the session has ended.

        Raises:
            InvalidTransitionError: If the session was never started
        """
        with self._lock:
            if self._clock is None:
                raise InvalidTransitionError("read elapsed time", self._state)
            if self._end_time is not None:
                now = min(now, self._end_time)
            return self._clock.elapsed(now)

    def _rollback_start(self, now: datetime) -> None:
        self._release_host_resources(now)
        self._activity = None
        self._accumulator = MetricAccumulator()
        self._clock = None
        self._open_channels = frozenset()
        self._state = SessionState.NOT_STARTED

    def _release_host_resources(self, now: datetime) -> None:
        """Close every open subscription and stop tracking.

        Each host call is attempted even if an earlier one fails.
        """
        subscriptions, self._subscriptions = self._subscriptions, {}
        for channel, handle in subscriptions.items():
            try:
                self._host.close_subscription(handle)
            except Exception:
                logger.exception(f"Failed to close {channel} subscription {handle!r}")
        try:
            self._host.stop_tracking(now)
        except Exception:
            logger.exception("Failed to stop host tracking session")

    def _on_persisted(self, success: bool) -> None:
        with self._lock:
            self._persisted = success
        if success:
            logger.info(f"Workout saved: activity={self._activity.name}")
        else:
            logger.error(f"Host failed to save workout: activity={self._activity.name}")

    def _require(self, operation: str, *allowed: SessionState) -> None:
        if self._state not in allowed:
            logger.warning(f"Rejected {operation} in state {self._state}")
            raise InvalidTransitionError(operation, self._state)
