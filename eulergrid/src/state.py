"""
Grid state representation using conservative variables.

State is defined on a (height, width) grid, indexed [y, x]:
    rho   - density
    rhoU  - horizontal momentum
    rhoV  - vertical momentum
    rhoE  - total energy
"""

import numpy as np
from dataclasses import dataclass
from typing import NamedTuple, Tuple

from .gas import GasProperties

HOT_SPOT_DENSITY = 10.0
HOT_SPOT_ENERGY = 1000.0


class GridIndexError(IndexError):
    """Raised when a cell coordinate falls outside the grid."""


class Cell(NamedTuple):
    """Fluid state at a single grid point."""
    density: float
    momentum_x: float
    momentum_y: float
    energy: float


@dataclass
class FlowState:
    """
    Represents the flow state on a 2D grid using conservative variables.

    Conservative variables (stored directly), each of shape (height, width):
        rho  : Density
        rhoU : Momentum in x
        rhoV : Momentum in y
        rhoE : Total energy

    Primitive variables (computed):
        u, v, p(gas)
    """
    rho: np.ndarray
    rhoU: np.ndarray
    rhoV: np.ndarray
    rhoE: np.ndarray

    def __post_init__(self):
        shapes = {self.rho.shape, self.rhoU.shape, self.rhoV.shape, self.rhoE.shape}
        if len(shapes) != 1:
            raise ValueError(f"Field shapes differ: {sorted(shapes)}")
        if self.rho.ndim != 2:
            raise ValueError(f"Fields must be 2D, got shape {self.rho.shape}")

    # --- Construction ---

    @classmethod
    def uniform(cls, width: int, height: int, gas: GasProperties) -> 'FlowState':
        """Gas at rest in its ambient state everywhere."""
        if width < 3 or height < 3:
            raise ValueError(f"Grid must be at least 3x3, got {width}x{height}")

        shape = (height, width)
        return cls(rho=np.full(shape, gas.air_density),
                   rhoU=np.zeros(shape),
                   rhoV=np.zeros(shape),
                   rhoE=np.full(shape, gas.air_energy))

    @classmethod
    def initialize(cls, width: int, height: int, gas: GasProperties,
                   hot_density: float = HOT_SPOT_DENSITY,
                   hot_energy: float = HOT_SPOT_ENERGY) -> 'FlowState':
        """
        Ambient grid seeded with a single dense, energetic cell at the centre.

        Args:
            width, height: Grid dimensions (both >= 3)
            gas: Gas properties providing the ambient state
            hot_density, hot_energy: Values written to the centre cell
        """
        state = cls.uniform(width, height, gas)
        cx, cy = width // 2, height // 2
        state.rho[cy, cx] = hot_density
        state.rhoE[cy, cx] = hot_energy
        return state

    # --- Geometry ---

    @property
    def height(self) -> int:
        return self.rho.shape[0]

    @property
    def width(self) -> int:
        return self.rho.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rho.shape

    def check_bounds(self, x: int, y: int):
        """Raise GridIndexError unless (x, y) addresses a cell of this grid."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise GridIndexError(
                f"Cell ({x}, {y}) outside {self.width}x{self.height} grid")

    # --- Cell access ---

    def cell(self, x: int, y: int) -> Cell:
        """Bounds-checked read of a single cell."""
        self.check_bounds(x, y)
        return Cell(density=float(self.rho[y, x]),
                    momentum_x=float(self.rhoU[y, x]),
                    momentum_y=float(self.rhoV[y, x]),
                    energy=float(self.rhoE[y, x]))

    def add_density(self, x: int, y: int, amount: float):
        """Add density to the cell at (x, y)."""
        self.check_bounds(x, y)
        self.rho[y, x] += amount

    def add_velocity(self, x: int, y: int, amount_x: float, amount_y: float):
        """Add momentum to the cell at (x, y)."""
        self.check_bounds(x, y)
        self.rhoU[y, x] += amount_x
        self.rhoV[y, x] += amount_y

    def inject(self, x: int, y: int, density: float,
               velocity: Tuple[float, float] = (0.0, 0.0)):
        """Additive perturbation of a single cell (click-to-inject)."""
        self.check_bounds(x, y)
        self.add_density(x, y, density)
        self.add_velocity(x, y, *velocity)

    # --- Primitive variables ---

    @property
    def u(self) -> np.ndarray:
        """Horizontal velocity."""
        return self.rhoU / self.rho

    @property
    def v(self) -> np.ndarray:
        """Vertical velocity."""
        return self.rhoV / self.rho

    def p(self, gas: GasProperties) -> np.ndarray:
        """Pressure field."""
        return gas.pressure(self.rho, self.rhoU, self.rhoV, self.rhoE)

    # --- Diagnostics ---

    def is_finite(self) -> bool:
        """True when no field holds a NaN or infinite value."""
        return all(np.all(np.isfinite(q)) for q in (self.rho, self.rhoU, self.rhoV, self.rhoE))

    def total_mass(self) -> float:
        return float(np.sum(self.rho))

    def total_energy(self) -> float:
        return float(np.sum(self.rhoE))

    # --- Copies ---

    def copy(self) -> 'FlowState':
        """Deep copy of all fields."""
        return FlowState(rho=self.rho.copy(), rhoU=self.rhoU.copy(),
                         rhoV=self.rhoV.copy(), rhoE=self.rhoE.copy())

    def read_only(self) -> 'FlowState':
        """Snapshot sharing this state's memory with writes disabled."""
        fields = []
        for arr in (self.rho, self.rhoU, self.rhoV, self.rhoE):
            view = arr.view()
            view.flags.writeable = False
            fields.append(view)
        return FlowState(*fields)

    def to_array(self) -> np.ndarray:
        """
        Stack the conservative variables.

        Returns:
            U: Array of shape (4, height, width) [rho, rhoU, rhoV, rhoE]
        """
        return np.stack([self.rho, self.rhoU, self.rhoV, self.rhoE])

    @classmethod
    def from_array(cls, U: np.ndarray) -> 'FlowState':
        """Create FlowState from a (4, height, width) conservative array."""
        return cls(rho=U[0].copy(), rhoU=U[1].copy(),
                   rhoV=U[2].copy(), rhoE=U[3].copy())
