"""
周期调度器 / Periodic ticker

固定周期、非重入、逐拍运行到结束的调度。下一拍的计时从 ``reset`` 开始,
因此每拍的计算时间会累积为漂移。
Fixed-period, non-reentrant, run-to-completion scheduling. The next period
counts from ``reset``, so per-tick compute time accumulates as drift.
"""

import time
from typing import Callable


class PeriodicTicker:
    """
    周期节拍器 / Periodic ticker

    Args:
        period_ms: 周期(毫秒) / Period in milliseconds
        clock: 单调时钟(秒) / Monotonic clock in seconds
        sleep: 休眠函数(秒) / Sleep function in seconds
    """

    def __init__(
        self,
        period_ms: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep
    ):
        if period_ms <= 0:
            raise ValueError(f"period_ms must be positive, got {period_ms}")
        self.period_s = period_ms / 1000.0
        self._clock = clock
        self._sleep = sleep
        self._origin = clock()

    def elapsed_ms(self) -> float:
        """自上次重置以来的毫秒数 / Milliseconds since the last reset"""
        return (self._clock() - self._origin) * 1000.0

    def reset(self) -> None:
        """计时器清零 / Reset the timer to zero"""
        self._origin = self._clock()

    def wait(self) -> None:
        """休眠直到周期到达 / Sleep until the period has elapsed"""
        remaining = self.period_s - (self._clock() - self._origin)
        if remaining > 0:
            self._sleep(remaining)


class StopWatch:
    """计算耗时计时器(微秒) / Compute-time stopwatch in microseconds"""

    def __init__(self, counter_ns: Callable[[], int] = time.perf_counter_ns):
        self._counter_ns = counter_ns
        self._start = counter_ns()

    def restart(self) -> None:
        self._start = self._counter_ns()

    def elapsed_us(self) -> float:
        return (self._counter_ns() - self._start) / 1000.0
