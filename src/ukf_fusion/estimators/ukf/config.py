"""
UKF Configuration and Data Structures / UKF配置和数据结构
======================================================

递推无迹卡尔曼滤波器的配置参数和数据结构定义。
Configuration parameters and data structures for the recursive Unscented Kalman Filter.
"""

from typing import NamedTuple, Optional
import chex
from dataclasses import dataclass


@dataclass
class UKFConfig:
    """
    UKF配置参数 / UKF configuration parameters

    Attributes:
        alpha: UKF缩放参数 / UKF scaling parameter (default: 1e-2)
        beta: 分布参数 / Distribution parameter (default: 2.0 for Gaussian)
        kappa: 次要缩放参数 / Secondary scaling parameter (default: None, auto-set to 3 - n)
    """
    alpha: float = 1e-2
    beta: float = 2.0
    kappa: Optional[float] = None

    def __post_init__(self):
        if self.alpha <= 0:
            raise ValueError(f"alpha must be positive, got {self.alpha}")


class UKFState(NamedTuple):
    """
    UKF状态表示 / UKF state representation

    Attributes:
        mean: 状态均值 / State mean
        covariance: 状态协方差 / State covariance
        log_likelihood: 自上次重置以来的累积对数似然 / Log-likelihood accumulated since the last reset
    """
    mean: chex.Array
    covariance: chex.Array
    log_likelihood: chex.Scalar


class NoiseCovariances(NamedTuple):
    """
    噪声协方差 / Noise covariances

    Attributes:
        process: 过程噪声 Q = Rv·I / Process noise
        measurement: 观测噪声 R = Rn·I / Measurement noise
    """
    process: chex.Array
    measurement: chex.Array
