"""Shared fixtures for the workout core tests."""

from datetime import datetime, timedelta, timezone

import pytest

from beactive.host.simulator import SimulatedSessionHost
from beactive.workouts.catalog import find_definition
from beactive.workouts.session import WorkoutSession

T0 = datetime(2026, 3, 14, 7, 30, tzinfo=timezone.utc)


def at(seconds: float) -> datetime:
    """Timestamp ``seconds`` after the test epoch."""
    return T0 + timedelta(seconds=seconds)


@pytest.fixture
def host():
    return SimulatedSessionHost()


@pytest.fixture
def cycling():
    return find_definition("Cycling")


@pytest.fixture
def strength():
    return find_definition("Strength Training")


@pytest.fixture
def session(host):
    return WorkoutSession(host, persist_on_end=True)


@pytest.fixture
def running_session(session, cycling):
    session.start(cycling, at(0))
    return session
