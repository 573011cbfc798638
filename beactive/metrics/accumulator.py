"""Live metric totals for a workout session."""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import NamedTuple

from beactive.workouts.catalog import INSTANTANEOUS_CHANNELS, ChannelKind


class Sample(NamedTuple):
    """One quantity sample delivered by the host."""

    value: float
    timestamp: datetime


class MetricAccumulator:
    """Running totals per channel.

    Heart rate keeps the last delivered value; energy and distance add up
    every batch. Values are not validated (negative or NaN samples are kept
    as delivered).
    """

    def __init__(self) -> None:
        self._values: dict[ChannelKind, float] = {}

    def ingest(self, channel: ChannelKind, samples: Sequence[Sample | tuple[float, datetime]]) -> None:
        """Merge a batch of samples into the channel total.

        Samples are expected in non-decreasing timestamp order.
        """
        if not samples:
            return

        if channel in INSTANTANEOUS_CHANNELS:
            value, _ = samples[-1]
            self._values[channel] = float(value)
            return

        batch_total = sum(float(value) for value, _ in samples)
        self._values[channel] = self._values.get(channel, 0.0) + batch_total

    def value(self, channel: ChannelKind) -> float:
        return self._values.get(channel, 0.0)

    def snapshot(self, channels: Iterable[ChannelKind]) -> dict[ChannelKind, float]:
        """Current value for each channel, 0.0 for channels never ingested."""
        return {channel: self.value(channel) for channel in channels}
