"""
Shared test fixtures / 共享测试固件
"""

import os
import sys

import pytest

# Add src to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from ukf_fusion.core.types import PendulumParams  # noqa: E402


class ListTelemetrySink:
    """收集遥测行的输出 / Telemetry sink collecting lines in memory"""

    def __init__(self):
        self.lines = []

    def emit(self, line: str) -> None:
        self.lines.append(line)


@pytest.fixture
def params() -> PendulumParams:
    return PendulumParams()


@pytest.fixture
def sink() -> ListTelemetrySink:
    return ListTelemetrySink()
