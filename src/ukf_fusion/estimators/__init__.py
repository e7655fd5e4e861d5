"""
State estimators / 状态估计器
"""

from .ukf import UnscentedKalmanFilter, create_pendulum_ukf, UKFConfig, UKFState

__all__ = [
    "UnscentedKalmanFilter",
    "create_pendulum_ukf",
    "UKFConfig",
    "UKFState",
]
