"""
阻尼单摆模型 / Damped Pendulum Model
==================================

估计器内部使用的离散时间过程模型和观测模型。
Discrete-time process and observation models used inside the estimator.

动力学 / Dynamics: θ̈ = -(g/L)sin(θ) - αθ̇, 显式欧拉离散 / explicit Euler.
"""

import jax.numpy as jnp
import chex
from typing import Optional

from ..core.types import PendulumParams
from .. import constants as C


def wrap_angle(theta: chex.Array) -> chex.Array:
    """
    单步角度修正 / Single-step angle correction

    θ > π 时减去 π, θ < -π 时加上 π, 否则不变。这不是模2π约简。
    Subtract π when θ > π, add π when θ < -π, otherwise unchanged.
    This is not a modulo-2π reduction.
    """
    return jnp.where(
        theta > jnp.pi,
        theta - jnp.pi,
        jnp.where(theta < -jnp.pi, theta + jnp.pi, theta)
    )


def pendulum_transition(
    x: chex.Array,
    u: chex.Array,
    params: PendulumParams
) -> chex.Array:
    """单摆状态转移 / Pendulum state transition"""
    del u  # 无驱动 / Unactuated
    theta = wrap_angle(x[0])
    omega = x[1]

    next_theta = theta + omega * params.dt
    next_omega = omega + (
        -(params.g / params.L) * jnp.sin(theta) - params.alpha * omega
    ) * params.dt

    return jnp.array([next_theta, next_omega])


def pendulum_observation(
    x: chex.Array,
    u: chex.Array,
    params: PendulumParams
) -> chex.Array:
    """单摆观测函数, 摆锤笛卡尔坐标 / Pendulum observation, bob Cartesian position"""
    del u
    theta = x[0]
    return jnp.array([
        jnp.sin(theta) * params.L,
        -jnp.cos(theta) * params.L
    ])


class PendulumModel:
    """
    单摆非线性模型 / Pendulum nonlinear model

    实现 ``NonlinearModel`` 协议, 供UKF调用。
    Implements the ``NonlinearModel`` protocol consumed by the UKF.

    Args:
        params: 物理参数 / Physical parameters
    """

    n_state = C.SS_X_LEN
    n_obs = C.SS_Z_LEN
    n_control = C.SS_U_LEN

    def __init__(self, params: Optional[PendulumParams] = None):
        self.params = params or PendulumParams()

    def predict_state(self, x: chex.Array, u: chex.Array) -> chex.Array:
        return pendulum_transition(x, u, self.params)

    def predict_measurement(self, x: chex.Array, u: chex.Array) -> chex.Array:
        return pendulum_observation(x, u, self.params)

    def __repr__(self) -> str:
        p = self.params
        return f"PendulumModel(g={p.g}, L={p.L}, alpha={p.alpha}, dt={p.dt})"
