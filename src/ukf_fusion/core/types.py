"""
Core type definitions for UKF fusion
UKF融合核心类型定义

This module defines the fixed-size vector types, configurations and the
protocols the fusion loop relies on.
本模块定义融合回路依赖的定长向量类型、配置和协议。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional, Protocol, Sequence, Union

import chex
import jax.numpy as jnp
from jax import Array
from jaxtyping import Float

from .. import constants as C

# Type aliases for clarity / 类型别名
Scalar = Union[float, Float[Array, ""]]
StateVector = Float[Array, "2"]  # (θ, θ̇)
MeasurementVector = Float[Array, "2"]  # (x, y)
ControlVector = Float[Array, "1"]
CovarianceMatrix = Float[Array, "n n"]

VectorLike = Union[chex.Array, Sequence[float]]


# ============================================================================
# Fixed-size vectors / 定长向量
# ============================================================================

def as_vector(values: VectorLike, length: int, name: str = "vector") -> chex.Array:
    """
    Build a float64 vector and check its length.
    构建float64向量并检查长度。

    Raises:
        ValueError: if the input is not a 1D array of ``length`` entries
    """
    vec = jnp.asarray(values, dtype=jnp.float64)
    if vec.shape != (length,):
        raise ValueError(f"{name} must have shape ({length},), got {vec.shape}")
    return vec


def zeros_state() -> StateVector:
    """Zero-filled state vector / 零状态向量"""
    return jnp.zeros(C.SS_X_LEN)


def zeros_control() -> ControlVector:
    """Zero-filled control vector / 零控制向量"""
    return jnp.zeros(C.SS_U_LEN)


# ============================================================================
# Configurations / 配置
# ============================================================================

class PendulumParams(NamedTuple):
    """
    阻尼单摆物理参数 / Damped pendulum physical parameters

    Attributes:
        g: 重力加速度 / gravitational acceleration [m/s²]
        L: 摆长 / rod length [m]
        alpha: 阻尼系数 / damping coefficient [1/s]
        dt: 离散时间步长 / discrete time step [s]
    """
    g: float = C.GRAVITY
    L: float = C.ROD_LENGTH
    alpha: float = C.DAMPING
    dt: float = C.SS_DT


class TelemetryMode(str, Enum):
    """遥测输出选择 / Telemetry field selection"""
    ANGLE = "angle"  # compute_ms truth_theta estimate_theta
    POSITION = "position"  # compute_ms noisy_y1 truth_y1 estimate_y1


@dataclass
class FusionConfig:
    """
    融合回路运行配置 / Fusion loop runtime configuration

    Attributes:
        period_ms: 节拍周期 / Tick period in milliseconds
        telemetry_mode: 遥测字段选择 / Telemetry field selection
        truth_initial_state: 真实初始状态 / Ground-truth initial (θ, θ̇)
        estimate_initial_state: 估计器初始状态 / Estimator initial (θ, θ̇)
        noise_amplitude: x观测均匀噪声幅值 / Uniform noise bound on measured x
        seed: 随机种子 / PRNG seed for the measurement noise
        max_ticks: 最大节拍数, None为无限 / Tick limit, None runs forever
        p_init, rv_init, rn_init: 重置调参 / Reset tuning scalars
    """
    period_ms: float = C.SS_DT_MILIS
    telemetry_mode: TelemetryMode = TelemetryMode.ANGLE
    truth_initial_state: Sequence[float] = field(
        default_factory=lambda: (float(C.TRUTH_INITIAL_ANGLE), 0.0)
    )
    estimate_initial_state: Sequence[float] = field(
        default_factory=lambda: (float(C.ESTIMATE_INITIAL_ANGLE), 0.0)
    )
    noise_amplitude: float = C.MEASUREMENT_NOISE_AMPLITUDE
    seed: int = C.DEFAULT_SEED
    max_ticks: Optional[int] = None
    p_init: float = C.P_INIT
    rv_init: float = C.Rv_INIT
    rn_init: float = C.Rn_INIT

    def __post_init__(self):
        self.telemetry_mode = TelemetryMode(self.telemetry_mode)
        if self.period_ms <= 0:
            raise ValueError(f"period_ms must be positive, got {self.period_ms}")
        if self.noise_amplitude < 0:
            raise ValueError(f"noise_amplitude must be non-negative, got {self.noise_amplitude}")
        if self.max_ticks is not None and self.max_ticks < 0:
            raise ValueError(f"max_ticks must be non-negative, got {self.max_ticks}")
        for name in ("p_init", "rv_init", "rn_init"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        as_vector(self.truth_initial_state, C.SS_X_LEN, "truth_initial_state")
        as_vector(self.estimate_initial_state, C.SS_X_LEN, "estimate_initial_state")


# ============================================================================
# Protocols / 协议
# ============================================================================

class NonlinearModel(Protocol):
    """
    非线性系统模型协议 / Nonlinear system model protocol

    估计器只通过这两个方法接触物理模型。
    The estimator only touches the physical model through these two methods.
    """
    n_state: int
    n_obs: int
    n_control: int

    def predict_state(self, x: chex.Array, u: chex.Array) -> chex.Array:
        """状态转移 f(x, u) / State transition"""
        ...

    def predict_measurement(self, x: chex.Array, u: chex.Array) -> chex.Array:
        """观测函数 h(x, u) / Observation function"""
        ...


class Estimator(Protocol):
    """估计器协议 / Estimator protocol consumed by the fusion loop"""

    def update(self, measurement: chex.Array, control: chex.Array) -> bool:
        ...

    def reset(
        self,
        state: chex.Array,
        p_scale: float,
        process_noise_scale: float,
        measurement_noise_scale: float,
    ) -> None:
        ...

    @property
    def state_estimate(self) -> chex.Array:
        ...

    def predicted_measurement(self, control: chex.Array) -> chex.Array:
        ...


class TelemetrySink(Protocol):
    """遥测输出协议 / Telemetry sink protocol"""

    def emit(self, line: str) -> None:
        ...
