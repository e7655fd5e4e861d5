"""
Nonlinear system models / 非线性系统模型
"""

from .pendulum import (
    wrap_angle,
    pendulum_transition,
    pendulum_observation,
    PendulumModel,
)

__all__ = [
    "wrap_angle",
    "pendulum_transition",
    "pendulum_observation",
    "PendulumModel",
]
