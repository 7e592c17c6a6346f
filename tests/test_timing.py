"""
Tests for scheduled tasks.
"""

import logging

import pytest

from warden.utils.timing import ManualScheduler, ScheduledTask, Timer


class TestScheduledTask:
    """Tests for ScheduledTask."""

    def test_fires_once(self):
        calls = []
        task = ScheduledTask(lambda: calls.append(1), deadline=0.0)

        task.fire()
        task.fire()

        assert calls == [1]
        assert task.fired
        assert not task.pending

    def test_cancel_prevents_fire(self):
        calls = []
        task = ScheduledTask(lambda: calls.append(1), deadline=0.0)

        task.cancel()
        task.fire()

        assert calls == []
        assert task.cancelled


class TestManualScheduler:
    """Tests for ManualScheduler."""

    def test_not_fired_before_deadline(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(20.0, lambda: calls.append("dismiss"))

        scheduler.advance(19.9)

        assert calls == []
        assert len(scheduler.pending_tasks) == 1

    def test_fired_at_deadline(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(20.0, lambda: calls.append("dismiss"))

        fired = scheduler.advance(20.0)

        assert fired == 1
        assert calls == ["dismiss"]
        assert scheduler.pending_tasks == []

    def test_cancelled_task_never_fires(self):
        scheduler = ManualScheduler()
        calls = []
        task = scheduler.call_later(1.0, lambda: calls.append("x"))

        task.cancel()
        scheduler.advance(10.0)

        assert calls == []

    def test_fires_in_deadline_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(3.0, lambda: calls.append("late"))
        scheduler.call_later(1.0, lambda: calls.append("early"))

        scheduler.advance(5.0)

        assert calls == ["early", "late"]

    def test_callback_sees_its_deadline(self):
        """Test that now() equals the task deadline inside the callback."""
        scheduler = ManualScheduler()
        seen = []
        scheduler.call_later(2.5, lambda: seen.append(scheduler.now()))

        scheduler.advance(10.0)

        assert seen == [2.5]
        assert scheduler.now() == 10.0

    def test_chained_task_within_window(self):
        """Test that a task scheduled by a callback fires if due in the same advance."""
        scheduler = ManualScheduler()
        calls = []

        def first():
            calls.append("first")
            scheduler.call_later(1.0, lambda: calls.append("second"))

        scheduler.call_later(1.0, first)
        scheduler.advance(2.0)

        assert calls == ["first", "second"]

    def test_negative_delay_fires_immediately(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(-5.0, lambda: calls.append("now"))

        scheduler.advance(0.0)

        assert calls == ["now"]


class TestTimer:
    """Tests for Timer."""

    def test_measures_block(self):
        with Timer("work") as t:
            pass

        assert t.elapsed >= 0.0
        assert t.elapsed_ms == t.elapsed * 1000

    def test_logs_duration(self, caplog):
        log = logging.getLogger("timing-test")

        with caplog.at_level(logging.DEBUG, logger="timing-test"):
            with Timer("model load", log):
                pass

        assert "model load took" in caplog.text

    def test_logs_failure_and_propagates(self, caplog):
        log = logging.getLogger("timing-test")

        with caplog.at_level(logging.DEBUG, logger="timing-test"):
            with pytest.raises(RuntimeError):
                with Timer("model load", log):
                    raise RuntimeError("boom")

        assert "model load failed after" in caplog.text
