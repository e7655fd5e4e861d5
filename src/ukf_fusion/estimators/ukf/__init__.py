"""
UKF (Unscented Kalman Filter) Package / 无迹卡尔曼滤波器包
=======================================================

逐拍递推的无迹卡尔曼滤波器, 支持失败检测和硬重置。
Tick-by-tick recursive Unscented Kalman Filter with failure detection and hard reset.
"""

# 主要接口 / Main interfaces
from .ukf import UnscentedKalmanFilter, create_pendulum_ukf

# 配置和数据结构 / Configuration and data structures
from .config import UKFConfig, UKFState, NoiseCovariances

__all__ = [
    # 主要接口 / Main interfaces
    'UnscentedKalmanFilter',
    'create_pendulum_ukf',

    # 配置和数据结构 / Configuration and data structures
    'UKFConfig',
    'UKFState',
    'NoiseCovariances',
]
