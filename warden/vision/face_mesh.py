"""
Face mesh detection for the cosmetic judgment overlay.

Uses MediaPipe Face Mesh. Landmarks only decorate the snapshot; nothing is
recognized, stored or compared.
"""

import cv2
import numpy as np
from typing import Optional, Tuple
from dataclasses import dataclass

from warden.utils.logger import get_logger

logger = get_logger(__name__)


# Face oval contour indices of the 468-point mesh, in drawing order
FACE_OVAL_INDICES = [
    10, 338, 297, 332, 284, 251, 389, 356, 454, 323, 361, 288,
    397, 365, 379, 378, 400, 377, 152, 148, 176, 149, 150, 136,
    172, 58, 132, 93, 234, 127, 162, 21, 54, 103, 67, 109,
]

# Iris centers (present when refine_landmarks=True)
LEFT_IRIS_CENTER = 468
RIGHT_IRIS_CENTER = 473

MESH_COLOR = (0, 255, 170)      # RGB
OVAL_COLOR = (255, 215, 0)
IRIS_COLOR = (255, 40, 40)
CROWN_COLOR = (255, 215, 0)


class FaceMeshError(Exception):
    """Face mesh model errors."""

    pass


@dataclass
class FaceLandmarks:
    """Face mesh result for one face."""

    # All landmarks, normalized 0-1, shape (N, 2)
    points: np.ndarray

    # Face bounding box (normalized 0-1)
    bbox: Tuple[float, float, float, float]  # (x_min, y_min, x_max, y_max)

    @property
    def has_iris(self) -> bool:
        return len(self.points) > RIGHT_IRIS_CENTER

    def to_pixels(self, width: int, height: int) -> np.ndarray:
        """Landmarks in pixel coordinates, shape (N, 2) int32."""
        scale = np.array([width, height], dtype=np.float32)
        return np.round(self.points * scale).astype(np.int32)


class FaceMeshDetector:
    """
    MediaPipe Face Mesh wrapper.

    Construction does no work. init_runtime() imports MediaPipe and load()
    builds the model, so a missing runtime or a broken model can be reported
    as FaceMeshError and the caller can carry on without it.
    """

    def __init__(
        self,
        min_detection_confidence: float = 0.5,
        max_num_faces: int = 1,
    ):
        self._min_detection_confidence = min_detection_confidence
        self._max_num_faces = max_num_faces
        self._solution = None
        self._face_mesh = None

    def init_runtime(self):
        """
        Import MediaPipe and locate the face mesh solution.

        Raises:
            FaceMeshError: If the runtime is missing or incomplete
        """
        if self._solution is not None:
            return

        try:
            import mediapipe as mp

            self._solution = mp.solutions.face_mesh
        except Exception as e:
            raise FaceMeshError(f"Face mesh runtime unavailable: {e}") from e

        logger.info("Face mesh runtime ready")

    def load(self):
        """
        Load the face mesh model.

        Raises:
            FaceMeshError: If MediaPipe or the model is unavailable
        """
        if self._face_mesh is not None:
            return

        self.init_runtime()

        try:
            self._face_mesh = self._solution.FaceMesh(
                static_image_mode=True,  # Single still frame
                max_num_faces=self._max_num_faces,
                refine_landmarks=True,  # Enable iris landmarks
                min_detection_confidence=self._min_detection_confidence,
            )
        except Exception as e:
            raise FaceMeshError(f"Could not load face mesh model: {e}") from e

        logger.info("Face mesh model loaded")

    def detect(self, frame: np.ndarray) -> Optional[FaceLandmarks]:
        """
        Detect a face in an RGB frame.

        Returns:
            FaceLandmarks for the first face, None if no face or not loaded
        """
        if self._face_mesh is None or frame is None or frame.size == 0:
            return None

        try:
            results = self._face_mesh.process(frame)
        except Exception as e:
            logger.debug(f"Face mesh processing failed: {e}")
            return None

        if not results.multi_face_landmarks:
            return None

        face = results.multi_face_landmarks[0]
        points = np.array([[lm.x, lm.y] for lm in face.landmark], dtype=np.float32)

        return FaceLandmarks(points=points, bbox=landmarks_bbox(points))

    def close(self):
        """Release MediaPipe resources."""
        if self._face_mesh is not None:
            self._face_mesh.close()
            self._face_mesh = None
            logger.info("Face mesh closed")

    @property
    def is_loaded(self) -> bool:
        return self._face_mesh is not None


def landmarks_bbox(points: np.ndarray) -> Tuple[float, float, float, float]:
    """Bounding box (x_min, y_min, x_max, y_max) of normalized landmarks."""
    x_min, y_min = np.min(points, axis=0)
    x_max, y_max = np.max(points, axis=0)
    return (float(x_min), float(y_min), float(x_max), float(y_max))


def crown_polygon(bbox: Tuple[float, float, float, float], width: int, height: int) -> np.ndarray:
    """
    Five-point crown sitting on top of the face box, in pixels.

    The crown is as wide as the face and a third as tall.
    """
    x_min, y_min, x_max, _ = bbox
    left, right = x_min * width, x_max * width
    base = y_min * height
    face_width = right - left
    top = base - face_width / 3.0
    mid = (left + right) / 2.0

    points = [
        (left, base),
        (left, top),
        (left + face_width * 0.25, base - face_width / 6.0),
        (mid, top),
        (right - face_width * 0.25, base - face_width / 6.0),
        (right, top),
        (right, base),
    ]
    return np.array(points, dtype=np.int32)


def decorate_snapshot(image: np.ndarray, face: Optional[FaceLandmarks]) -> np.ndarray:
    """
    Draw the judgment decoration on a copy of an RGB snapshot.

    Without a face the snapshot is returned unchanged (as a copy).
    """
    decorated = image.copy()
    if face is None:
        return decorated

    height, width = decorated.shape[:2]
    pixels = face.to_pixels(width, height)

    for x, y in pixels[::4]:
        cv2.circle(decorated, (int(x), int(y)), 1, MESH_COLOR, -1, cv2.LINE_AA)

    oval = pixels[[i for i in FACE_OVAL_INDICES if i < len(pixels)]]
    if len(oval) > 2:
        cv2.polylines(decorated, [oval.reshape(-1, 1, 2)], True, OVAL_COLOR, 2, cv2.LINE_AA)

    if face.has_iris:
        for idx in (LEFT_IRIS_CENTER, RIGHT_IRIS_CENTER):
            x, y = pixels[idx]
            cv2.circle(decorated, (int(x), int(y)), 4, IRIS_COLOR, -1, cv2.LINE_AA)

    crown = crown_polygon(face.bbox, width, height)
    cv2.fillPoly(decorated, [crown.reshape(-1, 1, 2)], CROWN_COLOR, cv2.LINE_AA)

    return decorated
