"""
Tests for the ambush loop timing.
"""

import random
import threading

import pytest

from warden.core.config import AmbushConfig
from warden.host.ambush import AmbushLoop


@pytest.fixture
def fast_config():
    """Config with tiny waits so tests finish quickly."""
    return AmbushConfig(
        min_sleep_seconds=1,
        max_sleep_seconds=2,
        cleanup_wait_seconds=0.05,
        poll_interval_seconds=0.01,
    )


class TestAmbushLoop:
    """Tests for AmbushLoop."""

    def test_sleep_range(self):
        loop = AmbushLoop(AmbushConfig(), rng=random.Random(0))

        sleeps = {loop.next_sleep() for _ in range(500)}

        assert min(sleeps) >= 10
        assert max(sleeps) <= 19

    def test_cleanup_signal_consumed(self, fast_config):
        loop = AmbushLoop(fast_config)
        loop.cleanup_done.set()

        assert loop.wait_for_cleanup() is True
        assert not loop.cleanup_done.is_set()

    def test_cleanup_wait_times_out(self, fast_config):
        loop = AmbushLoop(fast_config)

        assert loop.wait_for_cleanup() is False

    def test_stopped_loop_does_not_ambush(self, fast_config):
        loop = AmbushLoop(fast_config)
        calls = []
        loop.stop()

        assert loop.run_cycle(lambda: calls.append(1)) is False
        assert calls == []

    def test_stop_interrupts_sleep(self, fast_config):
        """Test that stop() ends a sleeping loop promptly."""
        config = AmbushConfig(min_sleep_seconds=30, max_sleep_seconds=31)
        loop = AmbushLoop(config)
        calls = []

        thread = threading.Thread(target=loop.run, args=(lambda: calls.append(1),))
        thread.start()
        loop.stop()
        thread.join(timeout=2.0)

        assert not thread.is_alive()
        assert calls == []

    def test_first_cycle_skips_cleanup_wait(self, fast_config, monkeypatch):
        """Test that only cycles after the first wait for cleanup."""
        loop = AmbushLoop(fast_config)
        waits = []
        monkeypatch.setattr(loop, "wait_for_cleanup", lambda: waits.append(1) or True)
        monkeypatch.setattr(loop, "next_sleep", lambda: 0)
        calls = []

        loop.run_cycle(lambda: calls.append("ambush"))
        loop.run_cycle(lambda: calls.append("ambush"))

        assert calls == ["ambush", "ambush"]
        assert waits == [1]
