"""
Boundary conditions for the 2D grid solver.

Conditions act on the outermost row or column of the grid in place, after
the interior has been updated.
"""

from abc import ABC, abstractmethod
from typing import Dict

from .state import FlowState

SIDES = ('left', 'right', 'top', 'bottom')

# (edge index, adjacent interior index) along the relevant axis
_EDGES = {
    'left': (0, 1),
    'right': (-1, -2),
    'top': (0, 1),
    'bottom': (-1, -2),
}


def _check_side(side: str):
    if side not in SIDES:
        raise ValueError(f"Unknown side: {side}. Options: {', '.join(SIDES)}")


class BoundaryCondition(ABC):
    """Abstract base class for boundary conditions."""

    @abstractmethod
    def apply(self, state: FlowState, side: str) -> FlowState:
        """
        Apply boundary condition to the edge cells.

        Args:
            state: Flow state, modified in place
            side: 'left', 'right', 'top' or 'bottom'

        Returns:
            The same state
        """
        pass


class SlipWallBC(BoundaryCondition):
    """
    Vertical side wall: zero vertical momentum, horizontal momentum copied
    from the adjacent interior column so flow is not reflected.
    """

    def apply(self, state: FlowState, side: str) -> FlowState:
        _check_side(side)
        edge, inner = _EDGES[side]

        if side in ('left', 'right'):
            state.rhoV[:, edge] = 0.0
            state.rhoU[:, edge] = state.rhoU[:, inner]
        else:
            state.rhoV[edge, :] = 0.0
            state.rhoU[edge, :] = state.rhoU[inner, :]

        return state


class ZeroGradientBC(BoundaryCondition):
    """
    Zero-gradient (Neumann) density and energy with zero vertical momentum.
    Prevents pressure spikes at the domain edge.
    """

    def apply(self, state: FlowState, side: str) -> FlowState:
        _check_side(side)
        edge, inner = _EDGES[side]

        if side in ('top', 'bottom'):
            state.rhoV[edge, :] = 0.0
            state.rho[edge, :] = state.rho[inner, :]
            state.rhoE[edge, :] = state.rhoE[inner, :]
        else:
            state.rhoV[:, edge] = 0.0
            state.rho[:, edge] = state.rho[:, inner]
            state.rhoE[:, edge] = state.rhoE[:, inner]

        return state


def default_boundaries() -> Dict[str, BoundaryCondition]:
    """Slip walls left and right, zero-gradient top and bottom."""
    return {
        'left': SlipWallBC(),
        'right': SlipWallBC(),
        'top': ZeroGradientBC(),
        'bottom': ZeroGradientBC(),
    }


def apply_boundaries(state: FlowState,
                     boundaries: Dict[str, BoundaryCondition] = None) -> FlowState:
    """
    Enforce boundary conditions on all four edges (in place).

    Left and right are applied before top and bottom.
    """
    if boundaries is None:
        boundaries = default_boundaries()

    for side in SIDES:
        if side in boundaries:
            boundaries[side].apply(state, side)

    return state
