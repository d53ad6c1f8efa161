"""Tests for RefreshScheduler timing, error isolation and background mode."""

from __future__ import annotations

import logging
import threading

import pytest

from utils.refresh_scheduler import RefreshScheduler


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestCooperative:
    def test_fires_only_when_interval_elapsed(self):
        clock = FakeClock()
        calls: list[float] = []
        sched = RefreshScheduler(lambda: calls.append(clock()) or True, interval_ms=60_000, clock=clock)

        assert sched.run_pending() is None
        clock.advance(59)
        assert sched.run_pending() is None
        clock.advance(1)
        assert sched.run_pending() is True
        assert calls == [1060.0]

    def test_next_run_is_one_interval_after_firing(self):
        clock = FakeClock()
        calls: list[int] = []
        sched = RefreshScheduler(lambda: calls.append(1), interval_ms=1_000, clock=clock)

        clock.advance(1.5)
        sched.run_pending()
        assert sched.seconds_until_due() == pytest.approx(1.0)
        clock.advance(1.0)
        sched.run_pending()

        assert len(calls) == 2
        assert sched.fire_count == 2

    def test_action_error_is_logged_and_schedule_continues(self, caplog):
        clock = FakeClock()

        def boom():
            raise RuntimeError("server down")

        sched = RefreshScheduler(boom, interval_ms=1_000, clock=clock)

        with caplog.at_level(logging.ERROR, logger="utils.refresh_scheduler"):
            clock.advance(1)
            sched.run_pending()
            clock.advance(1)
            sched.run_pending()

        assert sched.fire_count == 2
        assert len([r for r in caplog.records if r.exc_info]) == 2

    def test_run_pending_reports_action_outcome(self):
        clock = FakeClock()
        outcomes = iter([False, True])
        sched = RefreshScheduler(lambda: next(outcomes), interval_ms=1_000, clock=clock)

        clock.advance(1)
        assert sched.run_pending() is False
        clock.advance(1)
        assert sched.run_pending() is True

    def test_raising_action_reports_failure(self):
        def boom():
            raise RuntimeError("server down")

        assert RefreshScheduler(boom, interval_ms=1_000, clock=FakeClock()).fire() is False

    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            RefreshScheduler(lambda: None, interval_ms=0)

    def test_default_interval_is_one_minute(self):
        sched = RefreshScheduler(lambda: None)
        assert sched.interval_ms == 60_000
        assert sched.interval_s == 60.0


class TestBackground:
    def test_thread_fires_repeatedly_until_stopped(self):
        fired = threading.Event()
        calls: list[int] = []

        def action():
            calls.append(1)
            if len(calls) >= 2:
                fired.set()

        sched = RefreshScheduler(action, interval_ms=10)
        sched.start()
        try:
            assert fired.wait(timeout=5.0)
            assert sched.running
        finally:
            sched.stop(timeout=5.0)

        assert not sched.running
        assert len(calls) >= 2
