"""
单摆模型测试 / Pendulum Model Tests
================================

测试单步角度修正、过程模型和观测模型。
Tests for the single-step angle correction, process model and observation model.
"""

import pytest
import jax.numpy as jnp
import numpy as np

from ukf_fusion.core.types import PendulumParams
from ukf_fusion.models import PendulumModel, wrap_angle, pendulum_transition, pendulum_observation


class TestWrapAngle:
    """测试角度修正 / Test angle correction"""

    @pytest.mark.parametrize("theta", np.linspace(-np.pi, np.pi, 41)[1:])
    def test_noop_inside_range(self, theta):
        """(-π, π] 内不修改 / No-op inside (-π, π]"""
        assert float(wrap_angle(jnp.array(theta))) == theta

    def test_pi_is_unchanged(self):
        assert float(wrap_angle(jnp.array(jnp.pi))) == float(jnp.pi)

    @pytest.mark.parametrize("theta, expected", [
        (2.5 * np.pi, 1.5 * np.pi),
        (-2.5 * np.pi, -1.5 * np.pi),
        (3.5 * np.pi, 2.5 * np.pi),
        (1.2 * np.pi, 0.2 * np.pi),
        (-1.2 * np.pi, -0.2 * np.pi),
    ])
    def test_single_step_correction(self, theta, expected):
        """只加减一次π, 不做模约简 / One ±π correction, no modulo reduction"""
        wrapped = float(wrap_angle(jnp.array(theta)))
        assert np.isclose(wrapped, expected, rtol=0, atol=1e-12)

    def test_out_of_range_lands_inside_two_pi(self):
        for theta in (1.01 * np.pi, 2.9 * np.pi, -1.01 * np.pi, -2.9 * np.pi):
            wrapped = float(wrap_angle(jnp.array(theta)))
            assert -2 * np.pi < wrapped < 2 * np.pi

    def test_vectorized(self):
        theta = jnp.array([0.0, 2.5 * jnp.pi, -2.5 * jnp.pi])
        expected = jnp.array([0.0, 1.5 * jnp.pi, -1.5 * jnp.pi])
        assert jnp.allclose(wrap_angle(theta), expected)


class TestProcessModel:
    """测试过程模型 / Test process model"""

    def test_release_from_horizontal(self, params):
        """θ(0)=π/2, θ̇(0)=0 → θ(1)=π/2, θ̇(1)=-(g/L)Δt"""
        x = jnp.array([jnp.pi / 2, 0.0])
        x_next = pendulum_transition(x, jnp.zeros(1), params)

        assert jnp.isclose(x_next[0], jnp.pi / 2, atol=1e-12)
        assert jnp.isclose(x_next[1], -(params.g / params.L) * params.dt, atol=1e-12)

    def test_euler_step_with_velocity(self):
        params = PendulumParams(g=9.81, L=1.5, alpha=0.2, dt=0.01)
        theta, omega = 0.3, -0.7
        x_next = pendulum_transition(jnp.array([theta, omega]), jnp.zeros(1), params)

        expected_theta = theta + omega * params.dt
        expected_omega = omega + (-(params.g / params.L) * np.sin(theta) - params.alpha * omega) * params.dt
        assert np.isclose(float(x_next[0]), expected_theta, atol=1e-12)
        assert np.isclose(float(x_next[1]), expected_omega, atol=1e-12)

    def test_uses_wrapped_angle(self, params):
        """状态转移使用修正后的角度 / Transition uses the corrected angle"""
        x = jnp.array([2.5 * jnp.pi, 0.0])
        x_next = pendulum_transition(x, jnp.zeros(1), params)

        assert jnp.isclose(x_next[0], 1.5 * jnp.pi, atol=1e-12)
        # sin(1.5π) = -1
        assert jnp.isclose(x_next[1], (params.g / params.L) * params.dt, atol=1e-12)

    def test_control_is_ignored(self, params):
        x = jnp.array([0.4, 0.1])
        a = pendulum_transition(x, jnp.zeros(1), params)
        b = pendulum_transition(x, jnp.ones(1), params)
        assert jnp.array_equal(a, b)

    def test_equilibrium_is_fixed_point(self, params):
        x_next = pendulum_transition(jnp.zeros(2), jnp.zeros(1), params)
        assert jnp.allclose(x_next, 0.0)


class TestObservationModel:
    """测试观测模型 / Test observation model"""

    @pytest.mark.parametrize("theta", [-7.0, -np.pi, -1.0, 0.0, 0.5, np.pi / 2, 3.0, 10.0])
    def test_bob_lies_on_circle(self, params, theta):
        """y1² + y2² == L²"""
        y = pendulum_observation(jnp.array([theta, 0.0]), jnp.zeros(1), params)
        assert np.isclose(float(y[0] ** 2 + y[1] ** 2), params.L ** 2, atol=1e-12)

    def test_hanging_down(self, params):
        y = pendulum_observation(jnp.zeros(2), jnp.zeros(1), params)
        assert jnp.allclose(y, jnp.array([0.0, -params.L]))

    def test_no_wrapping(self, params):
        """观测模型使用原始角度 / Observation uses the raw angle"""
        theta = 2.5 * np.pi
        y = pendulum_observation(jnp.array([theta, 0.0]), jnp.zeros(1), params)
        assert np.isclose(float(y[0]), np.sin(theta) * params.L, atol=1e-12)
        assert np.isclose(float(y[1]), -np.cos(theta) * params.L, atol=1e-12)


class TestPendulumModel:
    """测试模型协议实现 / Test protocol implementation"""

    def test_dimensions(self):
        model = PendulumModel()
        assert (model.n_state, model.n_obs, model.n_control) == (2, 2, 1)

    def test_delegates_to_functions(self, params):
        model = PendulumModel(params)
        x = jnp.array([0.8, -0.3])
        u = jnp.zeros(1)
        assert jnp.array_equal(model.predict_state(x, u), pendulum_transition(x, u, params))
        assert jnp.array_equal(model.predict_measurement(x, u), pendulum_observation(x, u, params))
