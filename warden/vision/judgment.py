"""
The winner's judgment sequence.

Runs on a worker thread: start the face mesh runtime, open the webcam,
wait for a frame, load the face model, then take one still frame. Every
failure degrades instead of erroring:

- camera failure -> placeholder image, no animation
- face model failure -> plain snapshot without decoration
"""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import numpy as np

from warden.core.config import CameraConfig, OverlayConfig
from warden.vision.camera import Camera, CameraError, CameraFrame
from warden.vision.face_mesh import FaceMeshDetector, FaceMeshError, decorate_snapshot
from warden.vision.placeholder import load_placeholder
from warden.vision.registry import CameraRegistry
from warden.utils.timing import Timer
from warden.utils.logger import get_logger

logger = get_logger(__name__)


MSG_INITIALIZING = "Initializing analysis engine..."
MSG_WEBCAM = "Activating webcam..."
MSG_MODEL = "Loading Warden's analysis model..."
MSG_PREPARE = "Prepare for judgment..."


@dataclass
class Snapshot:
    """Still frame for the winner screen."""

    image: np.ndarray  # RGB (H, W, 3)
    placeholder: bool  # True when the webcam could not be used
    face_detected: bool = False


class JudgmentSequence:
    """
    One run of the judgment capture.

    The camera stays open after run() returns so the caller controls when
    it is released; release() and the CameraRegistry both close it.
    """

    def __init__(
        self,
        camera_config: CameraConfig,
        overlay_config: OverlayConfig,
        registry: CameraRegistry,
        placeholder_path: Optional[Path] = None,
        camera_factory: Optional[Callable[[], Camera]] = None,
        detector_factory: Optional[Callable[[], FaceMeshDetector]] = None,
    ):
        """
        Initialize the sequence.

        Args:
            camera_config: Capture settings
            overlay_config: Timing settings
            registry: Registry the camera is tracked in while open
            placeholder_path: Image used when the webcam is unavailable
            camera_factory: Builds the camera (defaults to Camera)
            detector_factory: Builds the face mesh detector
        """
        self._camera_config = camera_config
        self._overlay_config = overlay_config
        self._registry = registry
        self._placeholder_path = placeholder_path
        self._camera_factory = camera_factory or (lambda: Camera(camera_config, registry))
        self._detector_factory = detector_factory or FaceMeshDetector

        self._camera: Optional[Camera] = None
        self._detector: Optional[FaceMeshDetector] = None
        self._cancelled = threading.Event()

    def run(self, report: Callable[[str], None] = lambda message: None) -> Snapshot:
        """
        Run the sequence to a snapshot.

        Args:
            report: Receives a status line before each step

        Returns:
            Snapshot (placeholder on camera failure or cancellation)
        """
        report(MSG_INITIALIZING)
        self._detector = self._init_runtime()

        try:
            report(MSG_WEBCAM)
            first_frame = self._open_camera()

            try:
                report(MSG_MODEL)
                return self._judge(first_frame, report)
            except FaceMeshError as e:
                logger.info(f"Face detection failed, proceeding with snapshot only: {e}")
                return self._plain_snapshot(first_frame)

        except CameraError as e:
            logger.info(f"Camera failed, using placeholder: {e}")
            self._release_camera()
            return self.placeholder()

    def _init_runtime(self) -> Optional[FaceMeshDetector]:
        try:
            detector = self._detector_factory()
            detector.init_runtime()
        except Exception as e:
            logger.warning(f"Face mesh runtime unavailable: {e}")
            return None
        return detector

    def _open_camera(self) -> CameraFrame:
        self._check_cancelled()
        camera = self._camera_factory()
        self._camera = camera

        # release() may run on another thread while open() blocks, so the
        # local reference is what gets closed on any failure here
        try:
            camera.open()
            self._check_cancelled()
            return camera.wait_for_frame()
        except Exception:
            camera.close()
            raise

    def _judge(self, first_frame: CameraFrame, report: Callable[[str], None]) -> Snapshot:
        if self._detector is None:
            raise FaceMeshError("Face mesh runtime not initialized")

        with Timer("face mesh load", logger):
            self._detector.load()

        report(MSG_PREPARE)
        self._cancelled.wait(self._overlay_config.judgment_delay_seconds)
        self._check_cancelled()

        frame = self._capture(first_frame)
        face = self._detector.detect(frame.image)

        return Snapshot(
            image=decorate_snapshot(frame.image, face),
            placeholder=False,
            face_detected=face is not None,
        )

    def _plain_snapshot(self, first_frame: CameraFrame) -> Snapshot:
        self._check_cancelled()
        frame = self._capture(first_frame)
        return Snapshot(image=frame.image.copy(), placeholder=False)

    def _capture(self, fallback: CameraFrame) -> CameraFrame:
        """Latest frame, or the first frame if the camera stops delivering."""
        frame = self._camera.read_frame() if self._camera is not None else None
        return frame or fallback

    def _check_cancelled(self):
        if self._cancelled.is_set():
            raise CameraError("Judgment cancelled")

    def placeholder(self) -> Snapshot:
        """Placeholder snapshot at canvas size."""
        image = load_placeholder(
            self._placeholder_path,
            self._camera_config.frame_width,
            self._camera_config.frame_height,
        )
        return Snapshot(image=image, placeholder=True)

    def cancel(self):
        """Ask a running sequence to stop at its next step."""
        self._cancelled.set()

    def _release_camera(self):
        if self._camera is not None:
            self._camera.close()
            self._camera = None

    def release(self):
        """Close the camera and the face mesh model."""
        self._release_camera()

        if self._detector is not None:
            try:
                self._detector.close()
            except Exception as e:
                logger.error(f"Failed to close face mesh: {e}")
            self._detector = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()
