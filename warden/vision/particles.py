"""
Falling confetti for the winner screen.

Pure simulation: the GUI widget steps the field once per animation frame
and paints whatever is left.
"""

import random
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class Particle:
    """One spinning square of confetti."""

    x: float
    y: float
    size: float      # Edge length (pixels)
    speed: float     # Fall speed (pixels/frame)
    rotation: float  # Degrees
    hue: int         # 0-359, full saturation


class ParticleField:
    """
    A fixed batch of particles falling through a canvas.

    Particles spawn above the top edge, fall at their own speed and are
    removed once they pass the bottom edge. The field is finished when no
    particles remain.
    """

    def __init__(
        self,
        width: int,
        height: int,
        count: int = 100,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize and spawn the particles.

        Args:
            width: Canvas width (pixels)
            height: Canvas height (pixels)
            count: Number of particles
            rng: Random source
        """
        self._width = width
        self._height = height
        self._rng = rng or random.Random()
        self._frame = 0
        self._particles: List[Particle] = [self._spawn() for _ in range(count)]

    def _spawn(self) -> Particle:
        rng = self._rng
        return Particle(
            x=rng.random() * self._width,
            y=rng.random() * self._height - self._height,
            size=rng.random() * 10 + 5,
            speed=rng.random() * 3 + 2,
            rotation=rng.random() * 360,
            hue=int(rng.random() * 360),
        )

    def step(self) -> int:
        """
        Advance one frame.

        Returns:
            Number of particles still on or above the canvas
        """
        for p in self._particles:
            p.y += p.speed
            p.rotation = (p.rotation + p.speed) % 360

        self._particles = [p for p in self._particles if p.y <= self._height]
        self._frame += 1
        return len(self._particles)

    @property
    def particles(self) -> List[Particle]:
        return list(self._particles)

    @property
    def finished(self) -> bool:
        return not self._particles

    @property
    def frame(self) -> int:
        """Frames stepped so far."""
        return self._frame

    @property
    def size(self):
        return (self._width, self._height)

    def __len__(self) -> int:
        return len(self._particles)
