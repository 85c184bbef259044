"""
Display of the grid as coloured tiles with matplotlib.

The colour mapping is a pure function so it can be checked headless; the
renderer wraps it in a figure that also feeds mouse and keyboard input back
into the simulation.
"""

import logging
import time
from collections import deque
from typing import Dict, Tuple

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation

from .state import FlowState
from .solver import NumericalInstabilityError

logger = logging.getLogger(__name__)

OBSTACLE_COLOR = (200, 60, 60)
QUIT_KEYS = ('escape', 'q')


def density_to_rgb(state: FlowState, solid: np.ndarray, brightness: float = 255.0,
                   obstacle_color: Tuple[int, int, int] = OBSTACLE_COLOR) -> np.ndarray:
    """
    Map a grid to an RGB image, one pixel per cell.

    Fluid cells are grey with level rho * brightness clipped to [0, 255]
    (NaN shows as black); solid cells get obstacle_color.

    Returns:
        uint8 array of shape (height, width, 3)
    """
    level = np.nan_to_num(state.rho * brightness, nan=0.0, posinf=255.0, neginf=0.0)
    level = np.clip(level, 0, 255).astype(np.uint8)

    rgb = np.repeat(level[:, :, np.newaxis], 3, axis=2)
    rgb[solid] = obstacle_color
    return rgb


class FrameTimer:
    """Frames per second measured over the most recent frames."""

    def __init__(self, window: int = 30):
        self._stamps = deque(maxlen=window)

    def tick(self, now: float = None):
        self._stamps.append(time.perf_counter() if now is None else now)

    @property
    def fps(self) -> float:
        if len(self._stamps) < 2:
            return 0.0
        elapsed = self._stamps[-1] - self._stamps[0]
        return (len(self._stamps) - 1) / elapsed if elapsed > 0 else 0.0


class GridRenderer:
    """
    Live tile view of a simulation.

    Cell (x, y) is drawn over pixels [x*tile, (x+1)*tile) by
    [y*tile, (y+1)*tile), origin top-left, so event coordinates in data units
    are pixel coordinates.

    Usage:
        sim = Simulation(config)
        viz = GridRenderer(config.width, config.height, config.tile_size)
        viz.run(sim)
    """

    def __init__(self, width: int, height: int, tile_size: int,
                 brightness: float = 255.0, title: str = "Euler Fluid Simulation"):
        self.width = width
        self.height = height
        self.tile_size = tile_size
        self.brightness = brightness
        self.title = title
        self.timer = FrameTimer()
        self.simulation = None
        self.anim = None
        self.error = None

        self._setup_figure()

    def _setup_figure(self):
        dpi = 100
        self.fig = plt.figure(figsize=(self.width * self.tile_size / dpi,
                                       self.height * self.tile_size / dpi), dpi=dpi)
        self.ax = self.fig.add_axes([0, 0, 1, 1])
        self.ax.set_axis_off()

        self.img = self.ax.imshow(
            np.zeros((self.height, self.width, 3), dtype=np.uint8),
            interpolation='nearest',
            origin='upper',
            extent=(0, self.width * self.tile_size, self.height * self.tile_size, 0),
        )
        self._set_title(self.title)

    def _set_title(self, text: str):
        # Non-interactive backends have no window manager
        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title(text)

    def __call__(self, state: FlowState, solid: np.ndarray, metrics: Dict):
        """Render sink: draw the latest grid."""
        self.img.set_data(density_to_rgb(state, solid, self.brightness))
        self.timer.tick()
        self._set_title(f"{self.title} | iter {metrics['iteration']} | {self.timer.fps:.1f} FPS")

    # --- Input ---

    def connect(self, simulation):
        """Route mouse clicks and quit keys to the simulation."""
        self.simulation = simulation
        simulation.add_render_sink(self)
        canvas = self.fig.canvas
        canvas.mpl_connect('button_press_event', self._on_click)
        canvas.mpl_connect('key_press_event', self._on_key)
        canvas.mpl_connect('close_event', self._on_close)

    def _on_click(self, event):
        if self.simulation is not None and event.inaxes is self.ax:
            self.simulation.inject_at_pixel(event.xdata, event.ydata)

    def _on_key(self, event):
        if self.simulation is not None and event.key in QUIT_KEYS:
            self.simulation.cancel()
            plt.close(self.fig)

    def _on_close(self, event):
        if self.simulation is not None:
            self.simulation.cancel()

    # --- Loop ---

    def _stop(self):
        if self.anim is not None:
            self.anim.event_source.stop()

    def _update(self, frame_num):
        if not self.simulation.running:
            self._stop()
            return [self.img]
        try:
            self.simulation.tick()
        except NumericalInstabilityError as e:
            # The event loop swallows exceptions; keep it for run() to raise
            logger.error("Stopping display: %s", e)
            self.error = e
            self._stop()
            plt.close(self.fig)
        return [self.img]

    def run(self, simulation, interval_ms: int = 16, frames: int = None):
        """
        Open the window and tick the simulation every interval_ms.

        Args:
            simulation: Simulation to drive
            interval_ms: Delay between frames
            frames: Number of frames (None = until closed)

        Raises:
            NumericalInstabilityError: If the grid went non-finite during the run
        """
        self.connect(simulation)
        self.anim = animation.FuncAnimation(
            self.fig,
            self._update,
            frames=frames,
            interval=interval_ms,
            blit=False,
            repeat=False,
            cache_frame_data=False,
        )
        plt.show()

        if self.error is not None:
            raise self.error
