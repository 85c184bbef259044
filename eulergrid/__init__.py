"""
eulergrid - 2D Compressible Grid Flow Simulator
===============================================

Re-exports all public components from eulergrid.src
"""

from eulergrid.src import (
    # Gas properties
    GasProperties,
    calculate_pressure,
    # Grid state
    FlowState,
    Cell,
    GridIndexError,
    # Obstacles
    Obstacle,
    NoObstacle,
    BlockObstacle,
    DiscObstacle,
    build_obstacle,
    # Flux schemes
    FluxScheme,
    CentralPressureFlux,
    DiffusionFlux,
    # Boundary conditions
    BoundaryCondition,
    SlipWallBC,
    ZeroGradientBC,
    apply_boundaries,
    default_boundaries,
    # Source terms
    SourceTerm,
    InletSource,
    CompositeSourceTerm,
    Injection,
    # Input
    pixel_to_cell,
    handle_pointer,
    # Simulation
    Simulation,
    SimulationConfig,
    SimulationStatus,
    NumericalInstabilityError,
    scheme_from_config,
    __version__,
)

__all__ = [
    'GasProperties',
    'calculate_pressure',
    'FlowState',
    'Cell',
    'GridIndexError',
    'Obstacle',
    'NoObstacle',
    'BlockObstacle',
    'DiscObstacle',
    'build_obstacle',
    'FluxScheme',
    'CentralPressureFlux',
    'DiffusionFlux',
    'BoundaryCondition',
    'SlipWallBC',
    'ZeroGradientBC',
    'apply_boundaries',
    'default_boundaries',
    'SourceTerm',
    'InletSource',
    'CompositeSourceTerm',
    'Injection',
    'pixel_to_cell',
    'handle_pointer',
    'Simulation',
    'SimulationConfig',
    'SimulationStatus',
    'NumericalInstabilityError',
    'scheme_from_config',
]
