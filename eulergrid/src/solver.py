"""
Simulation driver for the 2D grid flow solver.

One tick:
    1. apply queued interactive injections to the current grid
    2. apply source terms (inlet)
    3. flux step -> new grid
    4. boundary conditions on the new grid
    5. swap the new grid in and hand it to the render sinks
"""

import dataclasses
import enum
import json
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .gas import GasProperties
from .state import FlowState
from .obstacles import build_obstacle
from .flux import FluxScheme, CentralPressureFlux, DiffusionFlux
from .sources import CompositeSourceTerm, InletSource, Injection
from .boundary import apply_boundaries, default_boundaries
from .interaction import handle_pointer

logger = logging.getLogger(__name__)

SCHEMES = ('pressure', 'diffusion')
OBSTACLE_NAMES = ('block', 'disc', 'none')


class NumericalInstabilityError(FloatingPointError):
    """Raised when the grid picks up NaN or infinite values."""


class SimulationStatus(enum.Enum):
    RUNNING = 'running'
    STOPPED = 'stopped'


@dataclass
class SimulationConfig:
    """Configuration for the 2D grid flow simulation."""
    width: int = 80
    height: int = 60
    tile_size: int = 10             # Display pixels per cell
    gamma: float = 1.4
    air_density: float = 1.225
    air_energy: float = 250.0
    scheme: str = 'pressure'        # Options: 'pressure', 'diffusion'
    dt: float = 0.1                 # Only used by the diffusion scheme
    diffusion: float = 0.1
    viscosity: float = 0.0001
    vertical_damping: float = 1.0   # e.g. 0.1 to calm vertical oscillation
    inlet_width: int = 20
    emission_rate: float = 1.0
    inlet_velocity: float = 10.0
    obstacle: str = 'block'         # Options: 'block', 'disc', 'none'
    obstacle_radius: float = 0.25   # Disc radius in normalised units
    click_density: float = 100.0
    click_velocity: Tuple[float, float] = (10.0, 0.0)
    check_finite: bool = True
    print_interval: int = 100

    def __post_init__(self):
        self.click_velocity = tuple(self.click_velocity)

        if self.width < 3 or self.height < 3:
            raise ValueError(f"Grid must be at least 3x3, got {self.width}x{self.height}")
        if self.tile_size <= 0:
            raise ValueError(f"Tile size must be positive, got {self.tile_size}")
        if self.gamma <= 1:
            raise ValueError(f"gamma must be greater than 1, got {self.gamma}")
        if self.inlet_width < 1:
            raise ValueError(f"Inlet width must be at least 1, got {self.inlet_width}")
        if self.scheme not in SCHEMES:
            raise ValueError(f"Unknown scheme: {self.scheme}. "
                             f"Options: {', '.join(SCHEMES)}")
        if self.obstacle not in OBSTACLE_NAMES:
            raise ValueError(f"Unknown obstacle: {self.obstacle}. "
                             f"Options: {', '.join(OBSTACLE_NAMES)}")
        if len(self.click_velocity) != 2:
            raise ValueError(f"click_velocity needs 2 components, got {self.click_velocity}")

    @property
    def gas(self) -> GasProperties:
        return GasProperties(gamma=self.gamma, air_density=self.air_density,
                             air_energy=self.air_energy)

    @classmethod
    def from_json(cls, path) -> 'SimulationConfig':
        """Load a configuration file; missing keys keep their defaults."""
        with open(path, "r", encoding='utf-8') as f:
            return cls(**json.load(f))

    def to_json(self, path):
        with open(path, "w", encoding='utf-8') as f:
            json.dump(dataclasses.asdict(self), f, ensure_ascii=False, indent=4)


def scheme_from_config(config: SimulationConfig) -> FluxScheme:
    """Create the flux scheme named in the configuration."""
    if config.scheme == 'pressure':
        return CentralPressureFlux(vertical_damping=config.vertical_damping)
    elif config.scheme == 'diffusion':
        return DiffusionFlux(dt=config.dt, diffusion=config.diffusion,
                             viscosity=config.viscosity)
    raise ValueError(f"Unknown scheme: {config.scheme}. Options: {', '.join(SCHEMES)}")


def obstacle_from_config(config: SimulationConfig) -> np.ndarray:
    """Build the solid mask named in the configuration."""
    kwargs = {'radius': config.obstacle_radius} if config.obstacle == 'disc' else {}
    return build_obstacle(config.obstacle, config.width, config.height, **kwargs)


RenderSink = Callable[[FlowState, np.ndarray, Dict], None]


class Simulation:
    """
    Real-time 2D grid flow simulation.

    Owns the grid and the solid mask. Everything else sees read-only
    snapshots, and interactive perturbations are queued and applied at the
    start of the next tick.

    Usage:
        sim = Simulation(SimulationConfig(width=80, height=60))
        sim.inject(10, 30, 100.0, (10.0, 0.0))
        for _ in range(100):
            metrics = sim.tick()
    """

    def __init__(self, config: SimulationConfig = None,
                 state: FlowState = None, solid: np.ndarray = None):
        """
        Initialize the simulation.

        Args:
            config: Simulation configuration
            state: Initial grid (default: ambient grid with a hot centre cell)
            solid: Solid mask (default: the configured obstacle)
        """
        self.config = config if config is not None else SimulationConfig()
        self.gas = self.config.gas

        if state is None:
            state = FlowState.initialize(self.config.width, self.config.height, self.gas)
        if state.shape != (self.config.height, self.config.width):
            raise ValueError(f"Initial state shape {state.shape} does not match "
                             f"configured grid {self.config.height}x{self.config.width}")

        if solid is None:
            solid = obstacle_from_config(self.config)
        else:
            solid = np.array(solid, dtype=bool)
            solid.flags.writeable = False
        if solid.shape != state.shape:
            raise ValueError(f"Solid mask shape {solid.shape} does not match "
                             f"grid shape {state.shape}")

        self._state = state
        self._solid = solid

        # Numerical components
        self.flux_scheme = scheme_from_config(self.config)
        self.boundaries = default_boundaries()
        self.source_terms = CompositeSourceTerm()
        self.source_terms.add(InletSource(inlet_width=self.config.inlet_width,
                                          emission_rate=self.config.emission_rate,
                                          inlet_velocity=self.config.inlet_velocity,
                                          energy=self.gas.air_energy))

        self.status = SimulationStatus.RUNNING
        self.iteration = 0
        self.time = 0.0
        self._pending = deque()
        self._render_sinks: List[RenderSink] = []

        logger.info("Simulation %dx%d, scheme=%s, obstacle=%s (%d solid cells)",
                    self.config.width, self.config.height, self.config.scheme,
                    self.config.obstacle, int(np.count_nonzero(solid)))

    # --- Read access ---

    @property
    def solid(self) -> np.ndarray:
        return self._solid

    def get_state(self) -> FlowState:
        """Read-only snapshot of the current grid."""
        return self._state.read_only()

    @property
    def running(self) -> bool:
        return self.status is SimulationStatus.RUNNING

    @property
    def pending_injections(self) -> int:
        return len(self._pending)

    # --- Input ---

    def inject(self, x: int, y: int, density: float,
               velocity: Tuple[float, float] = (0.0, 0.0)):
        """Queue a perturbation of cell (x, y) for the next tick."""
        self._state.check_bounds(x, y)
        self._pending.append(Injection(x, y, density, tuple(velocity)))

    def inject_at_pixel(self, px: float, py: float) -> bool:
        """Queue the configured click injection at a display pixel."""
        return handle_pointer(self, px, py)

    def cancel(self):
        """Stop the simulation. Stopping is final."""
        if self.running:
            logger.info("Simulation stopped at iteration %d", self.iteration)
        self.status = SimulationStatus.STOPPED

    def add_render_sink(self, sink: RenderSink):
        """Register a callable receiving (state, solid, metrics) every tick."""
        self._render_sinks.append(sink)

    # --- Stepping ---

    def tick(self) -> Dict:
        """
        Advance the simulation by one tick.

        Returns:
            Dictionary of per-tick metrics
        """
        if not self.running:
            raise RuntimeError("Cannot tick a stopped simulation")

        t0 = time.perf_counter()
        # Work on a copy; snapshots handed out earlier share self._state
        current = self._state.copy()

        while self._pending:
            self._pending.popleft().apply(current)

        self.source_terms.apply(current)
        new_state = self.flux_scheme.step(current, self._solid, self.gas)
        apply_boundaries(new_state, self.boundaries)

        if self.config.check_finite and not new_state.is_finite():
            logger.error("Non-finite values in the grid at iteration %d; stopping",
                         self.iteration + 1)
            self.cancel()
            raise NumericalInstabilityError(
                f"Grid became non-finite at iteration {self.iteration + 1}")

        self._state = new_state
        self.iteration += 1
        self.time += self.config.dt
        tick_ms = (time.perf_counter() - t0) * 1000

        metrics = self.compute_metrics(tick_ms)
        logger.debug("Tick %d: %.2f ms, mass=%.4e, energy=%.4e", self.iteration,
                     tick_ms, metrics['total_mass'], metrics['total_energy'])
        if self.iteration % self.config.print_interval == 0:
            logger.info("Iter %6d, t = %.4e, min rho = %.4e, max p = %.4e",
                        self.iteration, self.time, metrics['min_density'],
                        metrics['max_pressure'])

        snapshot = self.get_state()
        for sink in self._render_sinks:
            try:
                sink(snapshot, self._solid, metrics)
            except Exception:
                logger.exception("Render sink failed at iteration %d", self.iteration)
                self.cancel()
                raise

        return metrics

    def compute_metrics(self, tick_ms: float = 0.0) -> Dict:
        """Summary statistics of the current grid."""
        state = self._state
        fluid = ~self._solid
        return {
            'iteration': self.iteration,
            'time': self.time,
            'tick_ms': tick_ms,
            'fps': 1000.0 / tick_ms if tick_ms > 0 else 0.0,
            'total_mass': state.total_mass(),
            'total_energy': state.total_energy(),
            'min_density': float(np.min(state.rho[fluid])) if fluid.any() else float('nan'),
            'max_pressure': float(np.max(state.p(self.gas)[fluid])) if fluid.any() else float('nan'),
        }

    def run(self, max_ticks: Optional[int] = None, frame_delay: float = 0.0) -> Dict:
        """
        Tick until cancelled or max_ticks is reached.

        Args:
            max_ticks: Maximum number of ticks (None = until cancelled)
            frame_delay: Seconds to sleep between ticks

        Returns:
            Metrics of the last tick
        """
        metrics = self.compute_metrics()
        ticks = 0
        while self.running and (max_ticks is None or ticks < max_ticks):
            metrics = self.tick()
            ticks += 1
            if frame_delay > 0:
                time.sleep(frame_delay)
        return metrics
