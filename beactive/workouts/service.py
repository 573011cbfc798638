"""Workout screen service.

Glue between the UI and a WorkoutSession: keeps the picker selection,
checks health-data availability, requests authorization, starts the session
when the host grants it and answers the UI's display polls.

Authorization answers arrive on host threads, so the live session and the
pending selection are guarded by one service lock.

User-facing messages go to the injected ``notify`` callback; nothing here
raises into the host's callback threads.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from threading import RLock

from loguru import logger

from beactive.config.settings import settings
from beactive.host.contracts import SessionHost
from beactive.workouts.catalog import ActivityDefinition, ActivityPicker, ChannelKind, tracked_channels
from beactive.workouts.errors import AuthorizationDeniedError, InvalidTransitionError, SessionUnavailableError
from beactive.workouts.models import FinishedWorkoutRecord, WorkoutDisplay
from beactive.workouts.session import WorkoutSession
from beactive.workouts.states import SessionState


AWAITING_AUTHORIZATION = "awaiting_authorization"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def authorization_scope(activity: ActivityDefinition) -> tuple[frozenset[ChannelKind], frozenset[ChannelKind]]:
    """Channels to read during the workout and to write with the saved record."""
    read = frozenset(tracked_channels(activity))
    write = frozenset(c for c in read if c != ChannelKind.HEART_RATE)
    return read, write


class WorkoutService:
    """Drives one workout screen: at most one live session at a time."""

    def __init__(
        self,
        host: SessionHost,
        notify: Callable[[str], None],
        clock: Callable[[], datetime] = utcnow,
    ):
        self._host = host
        self._notify = notify
        self._clock = clock
        self.picker = ActivityPicker(settings.default_activity)
        self._session: WorkoutSession | None = None
        self._pending_activity: ActivityDefinition | None = None
        self._lock = RLock()

    @property
    def session(self) -> WorkoutSession | None:
        with self._lock:
            return self._session

    def select_activity(self, index: int) -> ActivityDefinition:
        return self.picker.select(index)

    def begin(self) -> None:
        """Request authorization for the selected activity.

        The session starts in on_authorization() once the host answers.

        Raises:
            InvalidTransitionError: If a workout is in progress or an
                authorization answer is still pending
        """
        with self._lock:
            if self._pending_activity is not None:
                raise InvalidTransitionError("begin", AWAITING_AUTHORIZATION)
            if self._session is not None and self._session.state in (SessionState.RUNNING, SessionState.PAUSED):
                raise InvalidTransitionError("begin", self._session.state)

            if not self._host.is_health_data_available():
                error = SessionUnavailableError("health data is not available on this device")
                logger.warning(str(error))
                self._notify(error.user_message)
                return

            activity = self.picker.current
            self._pending_activity = activity
            read, write = authorization_scope(activity)
            logger.info(f"Requesting authorization for {activity.name}")
            try:
                self._host.request_authorization(read, write, self.on_authorization)
            except Exception:
                self._pending_activity = None
                raise

    def on_authorization(self, success: bool) -> None:
        """Host callback with the user's authorization answer."""
        with self._lock:
            activity, self._pending_activity = self._pending_activity, None
            if activity is None:
                logger.warning("Authorization answer arrived with no pending workout")
                return

            if not success:
                error = AuthorizationDeniedError(activity.name)
                logger.warning(str(error))
                self._notify(error.user_message)
                return

            session = WorkoutSession(self._host)
            try:
                session.start(activity, self._clock())
            except SessionUnavailableError as e:
                self._notify(e.user_message)
                return
            except Exception:
                logger.exception(f"Starting {activity.name} failed after authorization")
                self._notify(SessionUnavailableError.user_message)
                return
            self._session = session

    def pause(self) -> None:
        self._live_session("pause").pause(self._clock())

    def resume(self) -> None:
        self._live_session("resume").resume(self._clock())

    def finish(self) -> FinishedWorkoutRecord:
        return self._live_session("end").end(self._clock())

    def snapshot(self) -> WorkoutDisplay | None:
        """Current display values, or None before a workout has started."""
        with self._lock:
            session = self._session
        if session is None:
            return None
        activity = session.activity
        distance = None
        if activity.distance_channel is not None:
            distance = session.display_value(activity.distance_channel)
        return WorkoutDisplay(
            activity_name=activity.name,
            state=session.state,
            heart_rate=session.display_value(ChannelKind.HEART_RATE),
            active_energy=session.display_value(ChannelKind.ACTIVE_ENERGY),
            distance=distance,
            elapsed=session.elapsed_display(self._clock()),
        )

    def _live_session(self, operation: str) -> WorkoutSession:
        with self._lock:
            session = self._session
        if session is None:
            raise InvalidTransitionError(operation, SessionState.NOT_STARTED)
        return session
