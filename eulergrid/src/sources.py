"""
Source terms for the 2D grid solver.

Sources mutate the current state in place once per tick, before the flux
step, so what they add propagates inward on the same tick.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .state import FlowState


class SourceTerm(ABC):
    """Abstract base class for source terms."""

    @abstractmethod
    def apply(self, state: FlowState) -> FlowState:
        """
        Add this source's contribution to the state.

        Args:
            state: Current flow state, modified in place

        Returns:
            The same state
        """
        pass


class InletSource(SourceTerm):
    """
    Inlet on the left edge, centred vertically.

    Each call adds emission_rate to the density and a fixed amount of energy
    on column 0 of the inlet rows, and sets their horizontal momentum to
    inlet_velocity.
    """

    def __init__(self, inlet_width: int, emission_rate: float,
                 inlet_velocity: float, energy: float):
        """
        Args:
            inlet_width: Number of rows covered by the inlet
            emission_rate: Density added per call
            inlet_velocity: Horizontal momentum imposed on the inlet cells
            energy: Energy added per call (independent of emission_rate)
        """
        if inlet_width < 1:
            raise ValueError(f"Inlet width must be at least 1, got {inlet_width}")
        self.inlet_width = inlet_width
        self.emission_rate = emission_rate
        self.inlet_velocity = inlet_velocity
        self.energy = energy

    def rows(self, height: int) -> slice:
        """Rows covered by the inlet, clipped to the grid."""
        start = height // 2 - self.inlet_width // 2
        stop = start + self.inlet_width
        return slice(max(start, 0), min(stop, height))

    def apply(self, state: FlowState) -> FlowState:
        rows = self.rows(state.height)
        state.rho[rows, 0] += self.emission_rate
        state.rhoU[rows, 0] = self.inlet_velocity
        state.rhoE[rows, 0] += self.energy
        return state


@dataclass(frozen=True)
class Injection:
    """A single interactive perturbation of one cell."""
    x: int
    y: int
    density: float
    velocity: Tuple[float, float] = (0.0, 0.0)

    def apply(self, state: FlowState) -> FlowState:
        state.inject(self.x, self.y, self.density, self.velocity)
        return state


class CompositeSourceTerm(SourceTerm):
    """Combines multiple source terms, applied in insertion order."""

    def __init__(self, sources: Optional[List[SourceTerm]] = None):
        self.sources = sources if sources is not None else []

    def add(self, source: SourceTerm):
        """Add a source term to the composite."""
        self.sources.append(source)

    def apply(self, state: FlowState) -> FlowState:
        for source in self.sources:
            source.apply(state)
        return state
