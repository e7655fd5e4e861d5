"""
UKF Fusion: fixed-rate Unscented Kalman Filter loop for a damped pendulum
UKF融合: 阻尼单摆的定周期无迹卡尔曼滤波回路

A JAX-based estimation loop validated against a simulated ground truth.
基于JAX的估计回路, 以模拟真值进行验证。
"""

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Enable double precision by default / 默认启用 64 位精度
import jax, os as _os
_os.environ.setdefault("JAX_ENABLE_X64", "True")
jax.config.update("jax_enable_x64", True)
# ---------------------------------------------------------------------------

# 核心模块导入 / Core module imports
from . import constants
from . import core
from . import models
from . import estimators
from . import simulation
from . import loop
from . import utils

from .loop import FusionContext, FusionLoopController

__all__ = [
    "constants",
    "core",
    "models",
    "estimators",
    "simulation",
    "loop",
    "utils",
    "FusionContext",
    "FusionLoopController",
]
