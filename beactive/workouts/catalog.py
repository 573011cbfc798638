"""Activity catalog - single source of truth for selectable workouts.

The order of ACTIVITY_DEFINITIONS is the on-screen picker order. Every
activity reads heart rate and active energy; locomotive activities also
read distance.
"""

from dataclasses import dataclass
from enum import StrEnum

from loguru import logger


class ChannelKind(StrEnum):
    HEART_RATE = "heart_rate"
    ACTIVE_ENERGY = "active_energy"
    DISTANCE = "distance"


class ActivityKind(StrEnum):
    SWIMMING = "swimming"
    CYCLING = "cycling"
    RUNNING = "running"
    TRADITIONAL_STRENGTH_TRAINING = "traditional_strength_training"
    MIND_AND_BODY = "mind_and_body"


# Latest sample wins; every other channel is a running sum
INSTANTANEOUS_CHANNELS = frozenset({ChannelKind.HEART_RATE})

CHANNEL_UNITS: dict[ChannelKind, str] = {
    ChannelKind.HEART_RATE: "count/min",
    ChannelKind.ACTIVE_ENERGY: "kcal",
    ChannelKind.DISTANCE: "m",
}

DISTANCE_ACTIVITY_KINDS = frozenset(
    {ActivityKind.SWIMMING, ActivityKind.CYCLING, ActivityKind.RUNNING}
)


@dataclass(frozen=True)
class ActivityDefinition:
    """Immutable selectable activity.

    Attributes:
        name: Picker title
        kind: Workout activity kind reported to the host
        distance_channel: Distance channel for locomotive activities, None otherwise
    """

    name: str
    kind: ActivityKind
    distance_channel: ChannelKind | None = None

    def __post_init__(self) -> None:
        bears_distance = self.kind in DISTANCE_ACTIVITY_KINDS
        if bears_distance and self.distance_channel is None:
            raise ValueError(f"Activity {self.name!r} ({self.kind}) requires a distance channel")
        if not bears_distance and self.distance_channel is not None:
            raise ValueError(f"Activity {self.name!r} ({self.kind}) cannot track distance")
        if self.distance_channel is not None and self.distance_channel != ChannelKind.DISTANCE:
            raise ValueError(f"Activity {self.name!r} has non-distance channel {self.distance_channel}")


ACTIVITY_DEFINITIONS: tuple[ActivityDefinition, ...] = (
    ActivityDefinition("Swimming", ActivityKind.SWIMMING, ChannelKind.DISTANCE),
    ActivityDefinition("Cycling", ActivityKind.CYCLING, ChannelKind.DISTANCE),
    ActivityDefinition("Running", ActivityKind.RUNNING, ChannelKind.DISTANCE),
    ActivityDefinition("Strength Training", ActivityKind.TRADITIONAL_STRENGTH_TRAINING),
    ActivityDefinition("Meditation", ActivityKind.MIND_AND_BODY),
)


def definitions() -> tuple[ActivityDefinition, ...]:
    """Return the selectable activities in picker order."""
    return ACTIVITY_DEFINITIONS


def find_definition(name: str) -> ActivityDefinition:
    """Look up an activity by name (case-insensitive).

    Raises:
        KeyError: If no activity has that name
    """
    wanted = name.strip().casefold()
    for definition in ACTIVITY_DEFINITIONS:
        if definition.name.casefold() == wanted:
            return definition
    raise KeyError(f"Unknown activity: {name!r}")


def tracked_channels(activity: ActivityDefinition) -> tuple[ChannelKind, ...]:
    """Channels a session for this activity subscribes to, in open order."""
    channels = [ChannelKind.HEART_RATE, ChannelKind.ACTIVE_ENERGY]
    if activity.distance_channel is not None:
        channels.append(activity.distance_channel)
    return tuple(channels)


class ActivityPicker:
    """Current picker selection over the catalog.

    Starts on the configured default activity; an unknown default falls back
    to the first catalog entry.
    """

    def __init__(self, default_name: str | None = None):
        self._definitions = definitions()
        self._current = self._definitions[0]
        if default_name:
            try:
                self._current = find_definition(default_name)
            except KeyError:
                logger.warning(f"Default activity {default_name!r} is not in the catalog, using {self._current.name}")

    @property
    def current(self) -> ActivityDefinition:
        return self._current

    def items(self) -> list[str]:
        """Picker row titles."""
        return [definition.name for definition in self._definitions]

    def select(self, index: int) -> ActivityDefinition:
        """Select the activity on picker row ``index``.

        Raises:
            IndexError: If the row does not exist
        """
        if not 0 <= index < len(self._definitions):
            raise IndexError(f"Picker row {index} out of range (0-{len(self._definitions) - 1})")
        self._current = self._definitions[index]
        logger.debug(f"Picker selection changed to {self._current.name}")
        return self._current
