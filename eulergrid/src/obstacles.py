"""
Static solid obstacles, expressed as boolean masks over the grid.

A mask has shape (height, width) with True marking solid cells. Masks are
built once per run and returned non-writeable.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Tuple


class Obstacle(ABC):
    """Abstract base class for obstacle shapes."""

    @abstractmethod
    def mask(self, width: int, height: int) -> np.ndarray:
        """
        Compute the solid cells of this shape.

        Args:
            width, height: Grid dimensions

        Returns:
            Boolean array of shape (height, width), True where solid
        """
        pass

    def build(self, width: int, height: int) -> np.ndarray:
        """Build the mask and freeze it."""
        if width < 3 or height < 3:
            raise ValueError(f"Grid must be at least 3x3, got {width}x{height}")
        solid = np.asarray(self.mask(width, height), dtype=bool)
        solid.flags.writeable = False
        return solid


class NoObstacle(Obstacle):
    """Open domain with no solid cells."""

    def mask(self, width: int, height: int) -> np.ndarray:
        return np.zeros((height, width), dtype=bool)


class BlockObstacle(Obstacle):
    """
    Axis-aligned rectangle given as fractions of the grid extent.

    The defaults cover rows 20-39 and columns 30-49 of an 80x60 grid and
    scale proportionally for other sizes.
    """

    def __init__(self, x_range: Tuple[float, float] = (3 / 8, 5 / 8),
                 y_range: Tuple[float, float] = (1 / 3, 2 / 3)):
        self.x_range = x_range
        self.y_range = y_range

    def mask(self, width: int, height: int) -> np.ndarray:
        x0, x1 = (int(round(f * width)) for f in self.x_range)
        y0, y1 = (int(round(f * height)) for f in self.y_range)

        solid = np.zeros((height, width), dtype=bool)
        solid[y0:y1, x0:x1] = True
        return solid


class DiscObstacle(Obstacle):
    """Round obstacle centred in the domain, radius in normalised units."""

    def __init__(self, radius: float = 0.25):
        if radius <= 0:
            raise ValueError(f"Disc radius must be positive, got {radius}")
        self.radius = radius

    def mask(self, width: int, height: int) -> np.ndarray:
        # Normalised cell centres in [0, 1]
        xs = (np.arange(width) + 0.5) / width
        ys = (np.arange(height) + 0.5) / height
        Y, X = np.meshgrid(ys, xs, indexing='ij')
        return np.hypot(X - 0.5, Y - 0.5) < self.radius


OBSTACLES = {
    'none': NoObstacle,
    'block': BlockObstacle,
    'disc': DiscObstacle,
}


def build_obstacle(name: str, width: int, height: int, **kwargs) -> np.ndarray:
    """
    Build the solid mask for a named obstacle shape.

    Args:
        name: One of 'none', 'block', 'disc'
        width, height: Grid dimensions
        **kwargs: Passed to the shape constructor (e.g. radius)
    """
    try:
        shape_cls = OBSTACLES[name]
    except KeyError:
        raise ValueError(f"Unknown obstacle: {name}. "
                         f"Options: {', '.join(OBSTACLES)}") from None
    return shape_cls(**kwargs).build(width, height)
