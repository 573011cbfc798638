"""Tests for PauseClock elapsed-time accounting."""

from datetime import timedelta

from beactive.metrics.pause_clock import PauseClock
from conftest import at


def test_elapsed_while_running():
    clock = PauseClock(at(0))
    assert clock.elapsed(at(0)) == timedelta(0)
    assert clock.elapsed(at(42)) == timedelta(seconds=42)


def test_pause_and_resume_subtracts_paused_interval():
    clock = PauseClock(at(0))
    assert clock.pause(at(10)) is True
    assert clock.is_paused
    assert clock.resume(at(20)) is True
    assert not clock.is_paused
    assert clock.elapsed(at(25)) == timedelta(seconds=15)
    assert clock.accumulated_pause == timedelta(seconds=10)


def test_second_pause_is_noop():
    clock = PauseClock(at(0))
    clock.pause(at(5))
    assert clock.pause(at(8)) is False
    assert clock.pause_start_time == at(5)
    clock.resume(at(9))
    assert clock.accumulated_pause == timedelta(seconds=4)


def test_resume_while_running_is_noop():
    clock = PauseClock(at(0))
    assert clock.resume(at(3)) is False
    assert clock.accumulated_pause == timedelta(0)


def test_elapsed_is_constant_while_paused():
    clock = PauseClock(at(0))
    clock.pause(at(30))
    readings = {clock.elapsed(at(t)) for t in (30, 31, 60, 600)}
    assert readings == {timedelta(seconds=30)}


def test_elapsed_is_non_decreasing_while_running():
    clock = PauseClock(at(0))
    clock.pause(at(10))
    clock.resume(at(15))
    readings = [clock.elapsed(at(t)) for t in range(15, 40)]
    assert readings == sorted(readings)


def test_multiple_pauses_accumulate():
    clock = PauseClock(at(0))
    clock.pause(at(10))
    clock.resume(at(12))
    clock.pause(at(20))
    clock.resume(at(30))
    assert clock.paused_duration(at(40)) == timedelta(seconds=12)
    assert clock.elapsed(at(40)) == timedelta(seconds=28)


def test_paused_duration_includes_open_pause():
    clock = PauseClock(at(0))
    clock.pause(at(10))
    assert clock.paused_duration(at(14)) == timedelta(seconds=4)
