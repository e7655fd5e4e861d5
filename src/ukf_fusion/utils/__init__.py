"""
Utilities module for UKF fusion
UKF融合工具模块

This module provides utility functions and helpers.
本模块提供工具函数和辅助功能。
"""

from .logger import (
    setup_logger,
    get_logger,
    log_info,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "log_info",
]
