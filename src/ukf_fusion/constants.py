"""
Constants for UKF fusion loop
UKF融合回路常量定义

This module contains the fixed timing, physical and filter-tuning constants.
本模块包含固定的时序、物理和滤波器调参常量。
"""

import jax.numpy as jnp

# ============================================================================
# Timing / 时序
# ============================================================================

SS_DT_MILIS = 10  # 采样周期(ms) / Sampling period in milliseconds
SS_DT = SS_DT_MILIS / 1000.0  # 采样周期(s) / Sampling period in seconds

# ============================================================================
# Pendulum Physics / 单摆物理参数
# ============================================================================

GRAVITY = 9.81  # 重力加速度 / Gravitational acceleration [m/s²]
ROD_LENGTH = 2.0  # 摆长 / Rod length [m]
DAMPING = 0.3  # 阻尼系数 / Damping coefficient [1/s]

# ============================================================================
# Dimensions / 维度
# ============================================================================

SS_X_LEN = 2  # 状态维度 (θ, θ̇) / State length
SS_Z_LEN = 2  # 观测维度 (x, y) / Measurement length
SS_U_LEN = 1  # 控制维度 / Control length (always zero)

# ============================================================================
# Filter Tuning / 滤波器调参
# ============================================================================

P_INIT = 10.0  # 初始协方差缩放 / Initial covariance scale
Rv_INIT = 1e-5  # 过程噪声缩放 / Process noise scale
Rn_INIT = 0.35  # 观测噪声缩放, 约为U[-1,1]方差 / Measurement noise scale, ~Var(U[-1,1])

# ============================================================================
# Initial Conditions / 初始条件
# ============================================================================

TRUTH_INITIAL_ANGLE = jnp.pi / 2  # 真实初始角度 / Ground-truth initial angle
ESTIMATE_INITIAL_ANGLE = -jnp.pi / 4  # 故意错误的估计初始角度 / Deliberately wrong guess

# ============================================================================
# Measurement Noise / 观测噪声
# ============================================================================

MEASUREMENT_NOISE_AMPLITUDE = 1.0  # x方向均匀噪声幅值 / Uniform noise bound on x [m]
DEFAULT_SEED = 0

# ============================================================================
# Telemetry / 遥测
# ============================================================================

TELEMETRY_PRECISION = 3
FAILURE_NOTICE = "Whoops, error on UKF update. Resetting the estimator!"
