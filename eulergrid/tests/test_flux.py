"""
Pytest tests for the stencil update schemes.

Tests verify:
1. Border and solid cells are never written
2. Hand-computed single-cell updates
3. Uniform fields are a fixed point
4. The input grid is not modified
"""

import numpy as np
import pytest

from eulergrid.src import (
    GasProperties, FlowState, CentralPressureFlux, DiffusionFlux,
    BlockObstacle, NoObstacle, apply_boundaries
)


@pytest.fixture
def gas():
    """Standard air properties."""
    return GasProperties(gamma=1.4, air_density=1.225, air_energy=250.0)


def random_state(width, height, seed=0):
    """Non-trivial grid with positive density and energy."""
    rng = np.random.default_rng(seed)
    shape = (height, width)
    return FlowState(rho=rng.uniform(1.0, 2.0, shape),
                     rhoU=rng.uniform(-1.0, 1.0, shape),
                     rhoV=rng.uniform(-1.0, 1.0, shape),
                     rhoE=rng.uniform(100.0, 200.0, shape))


def three_by_three(gas):
    """3x3 grid with a single interior cell at (1, 1)."""
    return FlowState.uniform(3, 3, GasProperties(gamma=gas.gamma, air_density=1.0,
                                                  air_energy=10.0))


SCHEMES = [CentralPressureFlux(), CentralPressureFlux(vertical_damping=0.1), DiffusionFlux()]


class TestUntouchedCells:
    """Border and solid cells pass through unchanged."""

    @pytest.mark.parametrize("scheme", SCHEMES)
    def test_border_unchanged(self, gas, scheme):
        state = random_state(12, 9)
        solid = NoObstacle().build(12, 9)
        new = scheme.step(state, solid, gas)

        for old_q, new_q in zip(state.to_array(), new.to_array()):
            assert np.array_equal(new_q[0, :], old_q[0, :])
            assert np.array_equal(new_q[-1, :], old_q[-1, :])
            assert np.array_equal(new_q[:, 0], old_q[:, 0])
            assert np.array_equal(new_q[:, -1], old_q[:, -1])

    @pytest.mark.parametrize("scheme", SCHEMES)
    def test_solid_unchanged(self, gas, scheme):
        state = random_state(16, 12, seed=1)
        solid = BlockObstacle().build(16, 12)
        assert solid.any()

        new = scheme.step(state, solid, gas)

        for old_q, new_q in zip(state.to_array(), new.to_array()):
            assert np.array_equal(new_q[solid], old_q[solid])

    @pytest.mark.parametrize("scheme", SCHEMES)
    def test_fluid_interior_updated(self, gas, scheme):
        state = random_state(10, 10, seed=2)
        new = scheme.step(state, NoObstacle().build(10, 10), gas)
        assert not np.array_equal(new.rho[1:-1, 1:-1], state.rho[1:-1, 1:-1])

    @pytest.mark.parametrize("scheme", SCHEMES)
    def test_input_not_modified(self, gas, scheme):
        state = random_state(8, 8, seed=3)
        before = state.copy()
        new = scheme.step(state, NoObstacle().build(8, 8), gas)

        assert new is not state
        assert np.array_equal(state.to_array(), before.to_array())

    def test_mask_shape_mismatch(self, gas):
        state = random_state(8, 6)
        with pytest.raises(ValueError):
            CentralPressureFlux().step(state, np.zeros((8, 6), dtype=bool), gas)


class TestCentralPressureFlux:
    """Hand-computed updates of a single interior cell."""

    def test_horizontal_gradients(self, gas):
        state = three_by_three(gas)
        state.rho[1, 2] = 2.0     # right neighbour denser
        state.rhoE[1, 0] = 20.0   # left neighbour more energetic

        new = CentralPressureFlux().step(state, NoObstacle().build(3, 3), gas)

        # p_left = 8, p_right = p_centre = 4
        # dp/dx = (4 - 8) / 2 = -2, drho/dx = (2 - 1) / 2 = 0.5
        # rhoU = 0 - (-2 + 0.5 * 4 / 2) = 1
        assert new.rhoU[1, 1] == pytest.approx(1.0)
        assert new.rhoV[1, 1] == pytest.approx(0.0)
        assert new.rho[1, 1] == pytest.approx(6.0 / 5)
        assert new.rhoE[1, 1] == pytest.approx(60.0 / 5)

    def test_vertical_gradients(self, gas):
        state = three_by_three(gas)
        state.rhoE[0, 1] = 20.0   # cell above
        state.rho[2, 1] = 3.0     # cell below

        new = CentralPressureFlux().step(state, NoObstacle().build(3, 3), gas)

        # dp/dy = (4 - 8) / 2 = -2, drho/dy = (3 - 1) / 2 = 1
        # rhoV = 0 - (-2 + 1 * 4 / 2) = 0
        assert new.rhoV[1, 1] == pytest.approx(0.0, abs=1e-12)
        assert new.rhoU[1, 1] == pytest.approx(0.0)

    def test_vertical_damping(self, gas):
        state = three_by_three(gas)
        state.rhoE[0, 1] = 20.0

        new = CentralPressureFlux(vertical_damping=0.1).step(
            state, NoObstacle().build(3, 3), gas)

        # dp/dy = 0.1 * (4 - 8) / 2 = -0.2
        assert new.rhoV[1, 1] == pytest.approx(0.2)

    def test_momentum_accumulates(self, gas):
        state = three_by_three(gas)
        state.rhoU[1, 1] = 5.0
        state.rhoV[1, 1] = -3.0

        new = CentralPressureFlux().step(state, NoObstacle().build(3, 3), gas)

        # Neighbours at rest with equal pressure, no gradients
        assert new.rhoU[1, 1] == pytest.approx(5.0)
        assert new.rhoV[1, 1] == pytest.approx(-3.0)

    def test_negative_pressure_propagates(self, gas):
        """A cell with energy below its kinetic term is not clamped."""
        state = three_by_three(gas)
        state.rhoU[1, 0] = 20.0   # kinetic 200 > energy 10 on the left

        p = state.p(gas)
        assert p[1, 0] < 0

        new = CentralPressureFlux().step(state, NoObstacle().build(3, 3), gas)

        # dp/dx = (4 - p_left) / 2
        expected = -(4.0 - p[1, 0]) / 2
        assert new.rhoU[1, 1] == pytest.approx(expected)


class TestUniformField:
    """A uniform field at rest has no gradients."""

    def test_step_and_boundaries_leave_ambient_grid(self, gas):
        state = FlowState.uniform(10, 10, gas)
        solid = NoObstacle().build(10, 10)

        new = apply_boundaries(CentralPressureFlux().step(state, solid, gas))

        assert np.allclose(new.rho, gas.air_density, rtol=1e-14, atol=0)
        assert np.allclose(new.rhoE, gas.air_energy, rtol=1e-14, atol=0)
        assert np.all(new.rhoU == 0.0)
        assert np.all(new.rhoV == 0.0)

    def test_diffusion_preserves_uniform(self, gas):
        state = FlowState.uniform(10, 10, gas)
        new = DiffusionFlux().step(state, NoObstacle().build(10, 10), gas)
        assert np.allclose(new.rho, gas.air_density, rtol=1e-14, atol=0)
        assert np.allclose(new.rhoE, gas.air_energy, rtol=1e-14, atol=0)


class TestDiffusionFlux:

    def test_spike_spreads(self, gas):
        state = FlowState.uniform(5, 5, gas)
        state.rho[2, 2] += 10.0
        state.rhoU[2, 2] = 4.0

        new = DiffusionFlux(dt=1.0, diffusion=0.1, viscosity=0.01).step(
            state, NoObstacle().build(5, 5), gas)

        # centre loses 4 * 0.1 * 10, each neighbour gains 0.1 * 10
        assert new.rho[2, 2] == pytest.approx(gas.air_density + 6.0)
        assert new.rho[1, 2] == pytest.approx(gas.air_density + 1.0)
        assert new.rho[2, 3] == pytest.approx(gas.air_density + 1.0)
        assert new.rho[1, 1] == pytest.approx(gas.air_density)

        assert new.rhoU[2, 2] == pytest.approx(4.0 - 0.04 * 4.0)
        assert new.rhoU[2, 1] == pytest.approx(0.04)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
