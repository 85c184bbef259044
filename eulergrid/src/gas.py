"""
Gas properties and the ideal-gas pressure relation.
"""

from dataclasses import dataclass


def calculate_pressure(rho, rhoU, rhoV, rhoE, gamma: float):
    """
    Pressure from total energy for an ideal gas.

        p = (gamma - 1) * (rhoE - (rhoU² + rhoV²) / (2 * rho))

    Works on scalars and numpy arrays alike. The result is not clamped, so a
    cell whose energy is below its kinetic term yields a negative pressure.
    """
    kinetic = (rhoU**2 + rhoV**2) / (2 * rho)
    return (gamma - 1) * (rhoE - kinetic)


@dataclass(frozen=True)
class GasProperties:
    """Adiabatic index and ambient state of the simulated gas."""
    gamma: float = 1.4          # Ratio of specific heats
    air_density: float = 1.225  # Ambient density
    air_energy: float = 250.0   # Ambient total energy

    def pressure(self, rho, rhoU, rhoV, rhoE):
        """Pressure for the given conservative variables."""
        return calculate_pressure(rho, rhoU, rhoV, rhoE, self.gamma)

    @property
    def ambient_pressure(self) -> float:
        """Pressure of the gas at rest in its ambient state."""
        return (self.gamma - 1) * self.air_energy
