"""
真值模拟器 / Truth Simulator
==========================

推进无噪声的真实单摆状态, 并合成带噪声的观测。
Advances the noise-free pendulum state and synthesizes a noisy measurement.

物理方程在此处内联实现, 与估计器内部模型相互独立。
The physics is inlined here, independent of the estimator's internal model.
"""

import jax
import jax.numpy as jnp
from jax import random
from typing import NamedTuple, Optional
import chex

from ..core.types import MeasurementVector, PendulumParams, StateVector, as_vector
from .. import constants as C


class TruthTick(NamedTuple):
    """
    单拍真值输出 / Single-tick truth output

    Attributes:
        state: 推进后的真实状态 / Advanced true state (θ, θ̇)
        measurement: 带噪声观测 / Noisy measurement (x, y)
        clean_measurement: 无噪声观测 / Noise-free measurement (x, y)
    """
    state: StateVector
    measurement: MeasurementVector
    clean_measurement: MeasurementVector


class TruthSimulator:
    """
    单摆真值模拟器 / Pendulum truth simulator

    Args:
        initial_state: 真实初始状态 / True initial state (θ, θ̇)
        params: 物理参数 / Physical parameters
        noise_amplitude: x观测的均匀噪声幅值 / Uniform noise bound on measured x
        seed: 随机种子 / PRNG seed
    """

    def __init__(
        self,
        initial_state: chex.Array,
        params: Optional[PendulumParams] = None,
        noise_amplitude: float = C.MEASUREMENT_NOISE_AMPLITUDE,
        seed: int = C.DEFAULT_SEED
    ):
        if noise_amplitude < 0:
            raise ValueError(f"noise_amplitude must be non-negative, got {noise_amplitude}")
        self.params = params or PendulumParams()
        self.noise_amplitude = noise_amplitude
        self._state = as_vector(initial_state, C.SS_X_LEN, "initial_state")
        self._key = random.PRNGKey(seed)
        self._advance = jax.jit(self._advance_impl)
        # 预编译, 结果丢弃, 不消耗随机键 / Compile ahead of the first tick; result discarded, key not consumed
        jax.block_until_ready(self._advance(self._state, self._key))

    @property
    def state(self) -> StateVector:
        """当前真实状态 / Current true state"""
        return self._state

    def _advance_impl(self, x: chex.Array, key: chex.PRNGKey):
        p = self.params
        theta, omega = x[0], x[1]

        theta = jnp.where(theta > jnp.pi, theta - jnp.pi, theta)
        theta = jnp.where(theta < -jnp.pi, theta + jnp.pi, theta)

        new_theta = theta + omega * p.dt
        new_omega = omega + (-(p.g / p.L) * jnp.sin(theta) - p.alpha * omega) * p.dt
        new_state = jnp.array([new_theta, new_omega])

        clean = jnp.array([
            jnp.sin(new_theta) * p.L,
            -jnp.cos(new_theta) * p.L
        ])
        noise = random.uniform(
            key, minval=-self.noise_amplitude, maxval=self.noise_amplitude
        )
        noisy = clean.at[0].add(noise)

        return new_state, noisy, clean

    def tick(self) -> TruthTick:
        """
        推进一拍 / Advance one tick

        Returns:
            推进后的状态和观测 / Advanced state and measurements
        """
        self._key, subkey = random.split(self._key)
        state, noisy, clean = self._advance(self._state, subkey)
        self._state = state
        return TruthTick(state=state, measurement=noisy, clean_measurement=clean)
