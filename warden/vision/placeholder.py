"""
Placeholder image shown when the webcam is unavailable.
"""

from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from warden.utils.logger import get_logger

logger = get_logger(__name__)


def make_gradient_placeholder(width: int, height: int, text: str = "NO CAMERA") -> np.ndarray:
    """
    Generate an RGB gradient card with centered text.

    Args:
        width: Image width
        height: Image height
        text: Caption drawn in the middle

    Returns:
        uint8 RGB image (height, width, 3)
    """
    y = np.linspace(0.0, 1.0, height, dtype=np.float32)[:, None]
    x = np.linspace(0.0, 1.0, width, dtype=np.float32)[None, :]

    c1 = np.array([40, 30, 90], dtype=np.float32)
    c2 = np.array([200, 150, 30], dtype=np.float32)

    mix = 0.62 * x + 0.38 * y
    img = c1[None, None, :] * (1.0 - mix[..., None]) + c2[None, None, :] * mix[..., None]
    img = np.clip(img, 0, 255).astype(np.uint8)

    font = cv2.FONT_HERSHEY_DUPLEX
    scale = max(0.6, width / 640.0 * 1.4)
    thickness = 2
    (tw, th), _ = cv2.getTextSize(text, font, scale, thickness)
    origin = ((width - tw) // 2, (height + th) // 2)
    cv2.putText(img, text, origin, font, scale, (255, 255, 255), thickness, cv2.LINE_AA)

    return img


def load_placeholder(path: Optional[Path], width: int, height: int) -> np.ndarray:
    """
    Load the placeholder asset as RGB, resized to (width, height).

    Falls back to a generated gradient if the asset is missing or unreadable.
    """
    if path is not None and Path(path).is_file():
        image = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if image is not None:
            image = cv2.resize(image, (width, height), interpolation=cv2.INTER_AREA)
            return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        logger.warning(f"Could not decode placeholder image {path}")

    return make_gradient_placeholder(width, height)
