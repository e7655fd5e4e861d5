"""
Core module for UKF fusion
UKF融合核心模块

This module provides vector helpers, configurations and protocols.
本模块提供向量工具、配置和协议。
"""

from .types import (
    # Type aliases / 类型别名
    Scalar,
    StateVector,
    MeasurementVector,
    ControlVector,
    CovarianceMatrix,

    # Vector helpers / 向量工具
    as_vector,
    zeros_state,
    zeros_control,

    # Configurations / 配置
    PendulumParams,
    TelemetryMode,
    FusionConfig,

    # Protocols / 协议
    NonlinearModel,
    Estimator,
    TelemetrySink,
)

__all__ = [
    # Type aliases
    "Scalar",
    "StateVector",
    "MeasurementVector",
    "ControlVector",
    "CovarianceMatrix",

    # Vector helpers
    "as_vector",
    "zeros_state",
    "zeros_control",

    # Configurations
    "PendulumParams",
    "TelemetryMode",
    "FusionConfig",

    # Protocols
    "NonlinearModel",
    "Estimator",
    "TelemetrySink",
]
