"""
Webcam capture for the judgment snapshot.

Frames live in memory only and are never written to disk. While open, a
Camera is tracked by the CameraRegistry so any close path can stop it.
"""

import sys
import cv2
import numpy as np
from typing import Optional
from dataclasses import dataclass

from warden.core.config import CameraConfig
from warden.vision.registry import CameraRegistry
from warden.utils.logger import get_logger

logger = get_logger(__name__)


def capture_backend() -> int:
    """OpenCV capture backend for this platform."""
    # DirectShow opens noticeably faster than MSMF on Windows
    if sys.platform.startswith("win"):
        return cv2.CAP_DSHOW
    return cv2.CAP_ANY


@dataclass
class CameraFrame:
    """One RGB frame and where it came from."""

    image: np.ndarray  # (H, W, 3) RGB
    timestamp: float
    frame_number: int


class CameraError(Exception):
    """Webcam could not be opened or stopped delivering."""

    pass


class Camera:
    """
    A single webcam track.

    open() either leaves the camera open and registered or raises
    CameraError with nothing left behind. stop() is what the registry
    calls; it is the same as close().
    """

    def __init__(self, config: CameraConfig, registry: Optional[CameraRegistry] = None):
        self._config = config
        self._registry = registry
        self._capture: Optional[cv2.VideoCapture] = None
        self._frames_read = 0

    def open(self) -> bool:
        """
        Start the capture at the configured resolution.

        Raises:
            CameraError: If the device is missing, busy or refuses access
        """
        if self.is_open:
            return True

        index = self._config.camera_index
        logger.info(f"Activating camera {index}")

        try:
            capture = cv2.VideoCapture(index, capture_backend())
            self._capture = capture
            if not capture.isOpened():
                raise CameraError(f"Camera {index} unavailable (missing, busy or permission denied)")

            for prop, value in (
                (cv2.CAP_PROP_FRAME_WIDTH, self._config.frame_width),
                (cv2.CAP_PROP_FRAME_HEIGHT, self._config.frame_height),
                (cv2.CAP_PROP_FPS, self._config.target_fps),
            ):
                capture.set(prop, value)

            if self._registry is not None:
                self._registry.register(self)

            # Early frames are often black while exposure settles
            for _ in range(self._config.warmup_frames):
                capture.grab()

        except CameraError:
            self.close()
            raise
        except cv2.error as e:
            self.close()
            raise CameraError(f"Camera {index} failed to start: {e}") from e

        self._frames_read = 0
        logger.info(
            "Camera %d active at %dx%d",
            index,
            int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        return True

    def read_frame(self) -> Optional[CameraFrame]:
        """Grab the latest frame as RGB, or None if the read failed."""
        if self._capture is None:
            return None

        try:
            ok, bgr = self._capture.read()
        except cv2.error as e:
            logger.error(f"Camera read failed: {e}")
            return None

        if not ok or bgr is None:
            return None

        self._frames_read += 1
        return CameraFrame(
            image=cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB),
            timestamp=cv2.getTickCount() / cv2.getTickFrequency(),
            frame_number=self._frames_read,
        )

    def wait_for_frame(self, attempts: Optional[int] = None) -> CameraFrame:
        """
        Keep reading until one frame arrives.

        Raises:
            CameraError: If nothing arrives within the allowed attempts
        """
        attempts = attempts or self._config.first_frame_attempts

        for _ in range(attempts):
            frame = self.read_frame()
            if frame is not None:
                return frame

        raise CameraError(f"No frame received after {attempts} attempts")

    def close(self):
        """Release the device and drop out of the registry. Idempotent."""
        capture, self._capture = self._capture, None
        if capture is not None:
            capture.release()
            logger.info("Camera released")

        if self._registry is not None:
            self._registry.unregister(self)

    def stop(self):
        self.close()

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
