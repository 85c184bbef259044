"""
2D Compressible Grid Flow Simulator
===================================

A real-time simulator of 2D compressible flow on a uniform grid, driven by
an inlet on the left edge and obstructed by a static solid obstacle.

Features:
- Ideal-gas pressure from conservative variables
- 5-point stencil update (pressure/density gradients + averaging)
- Alternative explicit diffusion scheme
- Block or disc obstacles as solid masks
- Slip side walls, zero-gradient top and bottom
- Click-to-inject interaction and live matplotlib display

State representation (conservative variables), arrays indexed [y, x]:
    rho   - density
    rhoU  - momentum in x
    rhoV  - momentum in y
    rhoE  - total energy

Example:
    sim = Simulation(SimulationConfig(width=80, height=60, obstacle='disc'))
    sim.inject(5, 30, 100.0, (10.0, 0.0))
    metrics = sim.tick()
    state = sim.get_state()
    print(state.cell(40, 30), state.p(sim.gas).max())
"""

from .gas import GasProperties, calculate_pressure
from .state import FlowState, Cell, GridIndexError
from .obstacles import Obstacle, NoObstacle, BlockObstacle, DiscObstacle, build_obstacle
from .flux import FluxScheme, CentralPressureFlux, DiffusionFlux
from .boundary import (BoundaryCondition, SlipWallBC, ZeroGradientBC,
                       apply_boundaries, default_boundaries)
from .sources import SourceTerm, InletSource, CompositeSourceTerm, Injection
from .interaction import pixel_to_cell, handle_pointer
from .solver import (Simulation, SimulationConfig, SimulationStatus,
                     NumericalInstabilityError, scheme_from_config)

__all__ = [
    # Gas properties
    'GasProperties',
    'calculate_pressure',

    # Grid state
    'FlowState',
    'Cell',
    'GridIndexError',

    # Obstacles
    'Obstacle',
    'NoObstacle',
    'BlockObstacle',
    'DiscObstacle',
    'build_obstacle',

    # Flux schemes
    'FluxScheme',
    'CentralPressureFlux',
    'DiffusionFlux',

    # Boundary conditions
    'BoundaryCondition',
    'SlipWallBC',
    'ZeroGradientBC',
    'apply_boundaries',
    'default_boundaries',

    # Source terms
    'SourceTerm',
    'InletSource',
    'CompositeSourceTerm',
    'Injection',

    # Input
    'pixel_to_cell',
    'handle_pointer',

    # Simulation
    'Simulation',
    'SimulationConfig',
    'SimulationStatus',
    'NumericalInstabilityError',
    'scheme_from_config',
]

__version__ = '1.0.0'
