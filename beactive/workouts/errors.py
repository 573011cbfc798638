"""Workout session error types.

All of these are local, recoverable conditions. Each carries a
``user_message`` that the UI can show as a dismissible notice.
"""


class WorkoutSessionError(Exception):
    """Base exception for workout session errors."""

    user_message = "Something went wrong with this workout."

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidTransitionError(WorkoutSessionError):
    """Raised when a lifecycle call is made from a state that does not permit it."""

    def __init__(self, operation: str, state: str):
        self.operation = operation
        self.state = state
        super().__init__(f"Invalid transition: {operation} from state {state}")

    @property
    def user_message(self) -> str:
        return f"Can't {self.operation} right now."


class SessionUnavailableError(WorkoutSessionError):
    """Raised when the host cannot create the underlying tracking session.

    The session stays not started, so the caller may retry or go back to
    activity selection.
    """

    user_message = "Workout tracking isn't available on this device for this activity."

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Workout session unavailable: {reason}")


class AuthorizationDeniedError(WorkoutSessionError):
    """Raised when the user declines access to health data."""

    user_message = "BeActive needs access to health data to track workouts. You can allow it in Settings."

    def __init__(self, activity_name: str):
        self.activity_name = activity_name
        super().__init__(f"Health data authorization denied for {activity_name}")


class HostSessionError(Exception):
    """Raised by a host implementation when it cannot start tracking."""
