"""
Registry of open capture devices.

One registry is created at startup and handed to everything that opens or
tears down cameras. stop_all() is called from overlay teardown, the close
sequence and application exit so no device stays open.
"""

import threading
from typing import List, Protocol, Set

from warden.utils.logger import get_logger

logger = get_logger(__name__)


class Stoppable(Protocol):
    """Anything that holds hardware open until stop() is called."""

    def stop(self) -> None: ...


class CameraRegistry:
    """
    Tracks open camera tracks.

    Cameras are opened on worker threads and stopped from the GUI thread,
    so membership changes are guarded by a lock.
    """

    def __init__(self):
        self._tracks: Set[Stoppable] = set()
        self._lock = threading.Lock()

    def register(self, track: Stoppable):
        """Start tracking an open device."""
        with self._lock:
            self._tracks.add(track)
        logger.debug(f"Camera track registered ({len(self)} active)")

    def unregister(self, track: Stoppable):
        """Stop tracking a device. Unknown tracks are ignored."""
        with self._lock:
            self._tracks.discard(track)

    def stop_all(self) -> int:
        """
        Stop every tracked device and clear the registry.

        A failure stopping one device does not prevent the rest from being
        stopped.

        Returns:
            Number of devices that stopped cleanly
        """
        with self._lock:
            tracks: List[Stoppable] = list(self._tracks)
            self._tracks.clear()

        stopped = 0
        for track in tracks:
            try:
                track.stop()
                stopped += 1
            except Exception as e:
                logger.error(f"Failed to stop camera track {track!r}: {e}")

        if tracks:
            logger.info(f"Force-stopped {stopped}/{len(tracks)} camera tracks")

        return stopped

    def __len__(self) -> int:
        with self._lock:
            return len(self._tracks)

    def __contains__(self, track) -> bool:
        with self._lock:
            return track in self._tracks
