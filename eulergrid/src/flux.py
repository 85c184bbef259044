"""
Stencil update schemes for the 2D grid solver.

Every scheme follows the same contract: the input state is copied, only
interior cells that are not solid are updated, and the new state is returned.
Border cells are left for the boundary conditions.

Vectorised over the interior with numpy slicing.
"""

import numpy as np
from abc import ABC, abstractmethod

from .gas import GasProperties
from .state import FlowState


def _check_mask(state: FlowState, solid: np.ndarray):
    if solid.shape != state.shape:
        raise ValueError(f"Solid mask shape {solid.shape} does not match "
                         f"grid shape {state.shape}")


def _neighbours(q: np.ndarray):
    """Centre, left, right, up and down views of the interior of q."""
    return (q[1:-1, 1:-1], q[1:-1, :-2], q[1:-1, 2:], q[:-2, 1:-1], q[2:, 1:-1])


def _laplacian(q: np.ndarray) -> np.ndarray:
    """5-point Laplacian over the interior (unit spacing)."""
    c, left, right, up, down = _neighbours(q)
    return left + right + up + down - 4.0 * c


class FluxScheme(ABC):
    """Abstract base class for grid update schemes."""

    @abstractmethod
    def update_interior(self, state: FlowState, gas: GasProperties) -> tuple:
        """
        Compute updated values for the interior cells.

        Args:
            state: Current flow state
            gas: Gas properties

        Returns:
            (rho, rhoU, rhoV, rhoE) for the interior, each (height-2, width-2)
        """
        pass

    def step(self, state: FlowState, solid: np.ndarray,
             gas: GasProperties) -> FlowState:
        """
        Advance the grid by one tick.

        Args:
            state: Current flow state (not modified)
            solid: Boolean mask, True where the cell is an obstacle
            gas: Gas properties

        Returns:
            New FlowState; border and solid cells equal the input
        """
        _check_mask(state, solid)
        new = state.copy()

        fluid = ~solid[1:-1, 1:-1]
        updated = self.update_interior(state, gas)
        for target, source, values in zip(
                (new.rho, new.rhoU, new.rhoV, new.rhoE),
                (state.rho, state.rhoU, state.rhoV, state.rhoE),
                updated):
            target[1:-1, 1:-1] = np.where(fluid, values, source[1:-1, 1:-1])

        return new


class CentralPressureFlux(FluxScheme):
    """
    Pressure/density gradient update with 5-point averaging.

    Momentum is pushed down the central-difference pressure gradient, with an
    extra correction weighted by the density gradient and the local pressure.
    Density and energy are replaced by the mean of the cell and its four
    neighbours, which is what keeps the explicit update bounded.
    """

    def __init__(self, vertical_damping: float = 1.0):
        """
        Args:
            vertical_damping: Factor applied to the vertical pressure gradient
                              (e.g. 0.1 to suppress vertical oscillation)
        """
        self.vertical_damping = vertical_damping

    def update_interior(self, state: FlowState, gas: GasProperties) -> tuple:
        p = state.p(gas)
        p_c, p_l, p_r, p_u, p_d = _neighbours(p)
        rho_c, rho_l, rho_r, rho_u, rho_d = _neighbours(state.rho)
        E_c, E_l, E_r, E_u, E_d = _neighbours(state.rhoE)

        # Central differences
        dpdx = (p_r - p_l) / 2
        dpdy = self.vertical_damping * (p_d - p_u) / 2
        drdx = (rho_r - rho_l) / 2
        drdy = (rho_d - rho_u) / 2

        rhoU = state.rhoU[1:-1, 1:-1] - (dpdx + drdx * p_c / 2)
        rhoV = state.rhoV[1:-1, 1:-1] - (dpdy + drdy * p_c / 2)

        rho = (rho_c + rho_l + rho_r + rho_u + rho_d) / 5
        rhoE = (E_c + E_l + E_r + E_u + E_d) / 5

        return rho, rhoU, rhoV, rhoE


class DiffusionFlux(FluxScheme):
    """
    Plain explicit diffusion of every field.

    Momentum spreads with the viscosity, density and energy with the
    diffusion coefficient. There is no pressure coupling.
    """

    def __init__(self, dt: float = 0.1, diffusion: float = 0.1,
                 viscosity: float = 0.0001):
        self.dt = dt
        self.diffusion = diffusion
        self.viscosity = viscosity

    def update_interior(self, state: FlowState, gas: GasProperties) -> tuple:
        visc = self.dt * self.viscosity
        diff = self.dt * self.diffusion

        rho = state.rho[1:-1, 1:-1] + diff * _laplacian(state.rho)
        rhoU = state.rhoU[1:-1, 1:-1] + visc * _laplacian(state.rhoU)
        rhoV = state.rhoV[1:-1, 1:-1] + visc * _laplacian(state.rhoV)
        rhoE = state.rhoE[1:-1, 1:-1] + diff * _laplacian(state.rhoE)

        return rho, rhoU, rhoV, rhoE
