"""
Telemetry formatting and sinks
遥测格式化与输出

One newline-terminated ASCII line per tick, space-separated floats with
three decimals.
每拍一行ASCII文本, 空格分隔, 保留三位小数。
"""

import sys
from typing import List, NamedTuple, Optional, TextIO

import chex
import numpy as np

from .core.types import TelemetryMode
from . import constants as C


class TickRecord(NamedTuple):
    """
    单拍记录 / Per-tick record

    Attributes:
        index: 节拍序号 / Tick index (0-based)
        compute_us: 估计器更新耗时(微秒) / Estimator update time in microseconds
        truth_state: 真实状态 / True state (θ, θ̇)
        measurement: 带噪声观测 / Noisy measurement
        clean_measurement: 无噪声观测 / Noise-free measurement
        estimate_state: 估计状态 / Estimated state
        estimate_measurement: 估计的观测投影 / Measurement-space projection of the estimate
        reset: 本拍是否重置了估计器 / Whether the estimator was reset this tick
    """
    index: int
    compute_us: float
    truth_state: chex.Array
    measurement: chex.Array
    clean_measurement: chex.Array
    estimate_state: chex.Array
    estimate_measurement: chex.Array
    reset: bool = False


def _fmt(value: float, precision: int = C.TELEMETRY_PRECISION) -> str:
    return f"{float(value):.{precision}f}"


def format_telemetry_line(record: TickRecord, mode: TelemetryMode) -> str:
    """
    格式化遥测行 / Format a telemetry line

    angle:    <compute_ms> <truth_theta> <estimate_theta>
    position: <compute_ms> <noisy_y1> <truth_y1> <estimate_y1>
    """
    mode = TelemetryMode(mode)
    compute_ms = record.compute_us / 1000.0
    if mode is TelemetryMode.ANGLE:
        fields = [compute_ms, record.truth_state[0], record.estimate_state[0]]
    else:
        fields = [
            compute_ms,
            record.measurement[0],
            record.clean_measurement[0],
            record.estimate_measurement[0],
        ]
    return " ".join(_fmt(v) for v in fields)


class StreamTelemetrySink:
    """写入文本流的遥测输出 / Telemetry sink writing to a text stream"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def emit(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()


class TraceRecorder:
    """
    轨迹记录器 / Trace recorder

    收集每拍记录并导出为numpy数组, 用于离线验证和绘图。
    Collects per-tick records and exports numpy arrays for offline validation
    and plotting.
    """

    def __init__(self):
        self.records: List[TickRecord] = []

    def append(self, record: TickRecord) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)

    def as_arrays(self) -> dict:
        """
        导出数组 / Export arrays

        Returns:
            dict with ``truth_state`` [T,2], ``estimate_state`` [T,2],
            ``measurement`` [T,2], ``clean_measurement`` [T,2],
            ``estimate_measurement`` [T,2], ``compute_us`` [T], ``reset`` [T]
        """
        if not self.records:
            raise ValueError("No records to export")
        return {
            "truth_state": np.stack([np.asarray(r.truth_state) for r in self.records]),
            "estimate_state": np.stack([np.asarray(r.estimate_state) for r in self.records]),
            "measurement": np.stack([np.asarray(r.measurement) for r in self.records]),
            "clean_measurement": np.stack([np.asarray(r.clean_measurement) for r in self.records]),
            "estimate_measurement": np.stack(
                [np.asarray(r.estimate_measurement) for r in self.records]
            ),
            "compute_us": np.array([r.compute_us for r in self.records]),
            "reset": np.array([r.reset for r in self.records], dtype=bool),
        }
