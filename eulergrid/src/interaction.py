"""
Mapping of pointer input onto grid cells.

Kept free of any windowing state so it can be used and tested headless.
"""

import logging
import math
from typing import Tuple

logger = logging.getLogger(__name__)


def pixel_to_cell(px: float, py: float, tile_size: int) -> Tuple[int, int]:
    """
    Convert a pixel position to the cell it falls in.

    Args:
        px, py: Pixel coordinates, origin at the top-left of the grid
        tile_size: Size of one cell in pixels

    Returns:
        (x, y) cell indices
    """
    if tile_size <= 0:
        raise ValueError(f"Tile size must be positive, got {tile_size}")
    if not (math.isfinite(px) and math.isfinite(py)) or px < 0 or py < 0:
        raise ValueError(f"Invalid pixel position ({px}, {py})")
    return int(px // tile_size), int(py // tile_size)


def handle_pointer(simulation, px, py) -> bool:
    """
    Queue a click injection at a pixel position.

    Clicks outside the grid (or with no position, as matplotlib reports for
    clicks outside the axes) are ignored.

    Returns:
        True if an injection was queued
    """
    if px is None or py is None:
        return False
    try:
        x, y = pixel_to_cell(px, py, simulation.config.tile_size)
    except ValueError:
        logger.debug("Ignoring click at (%s, %s)", px, py)
        return False

    cfg = simulation.config
    if not (x < cfg.width and y < cfg.height):
        logger.debug("Ignoring click outside grid at cell (%d, %d)", x, y)
        return False

    simulation.inject(x, y, cfg.click_density, cfg.click_velocity)
    return True
