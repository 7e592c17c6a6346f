"""
The ambush loop.

The window hides after each round. In the background the Warden waits for
the camera cleanup signal (bounded), sleeps a random while, then pops the
window back up on top of everything.
"""

import random
import threading
from typing import Callable, Optional

from warden.core.config import AmbushConfig
from warden.utils.logger import get_logger

logger = get_logger(__name__)


class AmbushLoop:
    """
    Timing logic for the ambush cycle, independent of Qt.

    Cycle: [wait for cleanup, except on the first cycle] -> sleep -> ambush.
    """

    def __init__(
        self,
        config: AmbushConfig,
        cleanup_done: Optional[threading.Event] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the loop.

        Args:
            config: Sleep range and cleanup wait settings
            cleanup_done: Set by the shell when the UI reports camera cleanup
            rng: Random source for sleep durations
        """
        self._config = config
        self.cleanup_done = cleanup_done or threading.Event()
        self._rng = rng or random.Random()
        self._stopped = threading.Event()
        self._first_cycle = True

    def next_sleep(self) -> int:
        """Random whole-second sleep in [min, max)."""
        return self._rng.randrange(self._config.min_sleep_seconds, self._config.max_sleep_seconds)

    def wait_for_cleanup(self) -> bool:
        """
        Poll for the cleanup signal until it arrives or the wait runs out.

        The signal is consumed when seen.

        Returns:
            True if cleanup was signalled, False on timeout or stop
        """
        logger.info("Waiting for camera cleanup...")
        remaining = self._config.cleanup_wait_seconds
        poll = self._config.poll_interval_seconds

        while remaining > 0 and not self._stopped.is_set():
            if self.cleanup_done.wait(min(poll, remaining)):
                self.cleanup_done.clear()
                logger.info("Camera cleanup completed")
                return True
            remaining -= poll

        if not self._stopped.is_set():
            logger.warning(
                f"Cleanup not signalled after {self._config.cleanup_wait_seconds:.0f} seconds, proceeding anyway"
            )
        return False

    def run_cycle(self, on_ambush: Callable[[], None]) -> bool:
        """
        Run one cycle.

        Returns:
            False if the loop was stopped before the ambush
        """
        if not self._first_cycle:
            self.wait_for_cleanup()
        self._first_cycle = False

        if self._stopped.is_set():
            return False

        seconds = self.next_sleep()
        logger.info(f"Warden is sleeping for {seconds} seconds")
        if self._stopped.wait(seconds):
            return False

        logger.info("Warden is waking up! Ambush time.")
        on_ambush()
        return True

    def run(self, on_ambush: Callable[[], None]):
        """Run cycles until stopped."""
        while self.run_cycle(on_ambush):
            pass

    def stop(self):
        """Stop the loop; interrupts any sleep or cleanup wait."""
        self._stopped.set()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()
