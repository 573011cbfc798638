"""Tests for MetricAccumulator aggregation semantics."""

import math

import pytest

from beactive.metrics.accumulator import MetricAccumulator, Sample
from beactive.workouts.catalog import ChannelKind
from conftest import at


def _samples(*values):
    return [Sample(v, at(i)) for i, v in enumerate(values)]


def test_unseen_channel_reads_zero():
    acc = MetricAccumulator()
    for channel in ChannelKind:
        assert acc.value(channel) == 0.0


def test_heart_rate_keeps_last_sample():
    acc = MetricAccumulator()
    acc.ingest(ChannelKind.HEART_RATE, _samples(140, 150, 90))
    assert acc.value(ChannelKind.HEART_RATE) == 90

    acc.ingest(ChannelKind.HEART_RATE, _samples(101))
    assert acc.value(ChannelKind.HEART_RATE) == 101


def test_empty_heart_rate_batch_is_noop():
    acc = MetricAccumulator()
    acc.ingest(ChannelKind.HEART_RATE, _samples(72))
    acc.ingest(ChannelKind.HEART_RATE, [])
    assert acc.value(ChannelKind.HEART_RATE) == 72


@pytest.mark.parametrize("channel", [ChannelKind.ACTIVE_ENERGY, ChannelKind.DISTANCE])
def test_cumulative_channels_sum_batches(channel):
    acc = MetricAccumulator()
    acc.ingest(channel, _samples(1.5, 2.5))
    acc.ingest(channel, _samples(4.0))
    assert acc.value(channel) == pytest.approx(8.0)


@pytest.mark.parametrize("split", range(0, 6))
def test_cumulative_ingestion_is_partition_independent(split):
    """Any split of one batch into two yields the same total."""
    samples = _samples(3.2, 0.7, 11.0, 4.4, 0.05)

    whole = MetricAccumulator()
    whole.ingest(ChannelKind.ACTIVE_ENERGY, samples)

    parts = MetricAccumulator()
    parts.ingest(ChannelKind.ACTIVE_ENERGY, samples[:split])
    parts.ingest(ChannelKind.ACTIVE_ENERGY, samples[split:])

    assert parts.value(ChannelKind.ACTIVE_ENERGY) == pytest.approx(whole.value(ChannelKind.ACTIVE_ENERGY))


def test_plain_tuples_are_accepted():
    acc = MetricAccumulator()
    acc.ingest(ChannelKind.DISTANCE, [(25.0, at(1)), (25.0, at(2))])
    assert acc.value(ChannelKind.DISTANCE) == 50.0


def test_values_are_not_validated():
    acc = MetricAccumulator()
    acc.ingest(ChannelKind.ACTIVE_ENERGY, _samples(5.0, -2.0))
    acc.ingest(ChannelKind.HEART_RATE, _samples(float("nan")))
    assert acc.value(ChannelKind.ACTIVE_ENERGY) == 3.0
    assert math.isnan(acc.value(ChannelKind.HEART_RATE))


def test_snapshot_defaults_missing_channels():
    acc = MetricAccumulator()
    acc.ingest(ChannelKind.HEART_RATE, _samples(120))
    snapshot = acc.snapshot([ChannelKind.HEART_RATE, ChannelKind.ACTIVE_ENERGY])
    assert snapshot == {ChannelKind.HEART_RATE: 120.0, ChannelKind.ACTIVE_ENERGY: 0.0}
