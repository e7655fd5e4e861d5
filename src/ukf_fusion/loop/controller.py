"""
融合回路控制器 / Fusion Loop Controller
=====================================

周期性地推进真值、调用估计器、检测数值失败并重置估计器。
Periodically advances the truth, invokes the estimator, detects numerical
failure and resets the estimator.

每拍顺序 / Per-tick order:
    真值推进 → 观测生成 → 估计器更新 → (失败时)重置 → 遥测
    truth advance → measurement → estimator update → (on failure) reset → telemetry
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

import chex
import jax.numpy as jnp

from ..core.types import (
    Estimator,
    FusionConfig,
    PendulumParams,
    TelemetrySink,
    zeros_control,
    zeros_state,
)
from ..estimators.ukf import UKFConfig, UnscentedKalmanFilter
from ..models.pendulum import PendulumModel
from ..simulation.truth import TruthSimulator
from ..telemetry import (
    StreamTelemetrySink,
    TickRecord,
    TraceRecorder,
    format_telemetry_line,
)
from .scheduler import PeriodicTicker, StopWatch
from ..utils.logger import get_logger
from .. import constants as C

logger = get_logger(__name__)


class LoopState(str, Enum):
    """回路状态 / Loop state"""
    RUNNING = "running"
    RECOVERING = "recovering"  # 瞬态, 同一拍内回到RUNNING / Transient, back to RUNNING within the tick


@dataclass
class FusionContext:
    """
    融合回路上下文 / Fusion loop context

    回路所需的全部可变状态, 由单个控制器独占。
    All mutable state the loop needs, owned by a single controller.
    """
    truth: TruthSimulator
    estimator: Estimator
    sink: TelemetrySink
    config: FusionConfig = field(default_factory=FusionConfig)
    recorder: Optional[TraceRecorder] = None
    control: chex.Array = field(default_factory=zeros_control)
    state: LoopState = LoopState.RUNNING
    tick_count: int = 0
    reset_count: int = 0
    total_compute_us: float = 0.0
    last_record: Optional[TickRecord] = None

    @classmethod
    def from_config(
        cls,
        config: Optional[FusionConfig] = None,
        sink: Optional[TelemetrySink] = None,
        params: Optional[PendulumParams] = None,
        ukf_config: Optional[UKFConfig] = None,
        recorder: Optional[TraceRecorder] = None
    ) -> "FusionContext":
        """
        按配置构建真值模拟器和UKF / Build the truth simulator and UKF from a config

        两者共享同一组物理参数(同一个Δt)。
        Both share one set of physical parameters (one Δt).
        """
        config = config or FusionConfig()
        params = params or PendulumParams()

        truth = TruthSimulator(
            initial_state=jnp.asarray(config.truth_initial_state, dtype=jnp.float64),
            params=params,
            noise_amplitude=config.noise_amplitude,
            seed=config.seed
        )
        estimator = UnscentedKalmanFilter(
            model=PendulumModel(params),
            initial_state=jnp.asarray(config.estimate_initial_state, dtype=jnp.float64),
            p_init=config.p_init,
            rv_init=config.rv_init,
            rn_init=config.rn_init,
            config=ukf_config
        )
        return cls(
            truth=truth,
            estimator=estimator,
            sink=sink if sink is not None else StreamTelemetrySink(),
            config=config,
            recorder=recorder
        )


class RunSummary(NamedTuple):
    """
    运行摘要 / Run summary

    Attributes:
        ticks: 已执行节拍数 / Ticks executed
        resets: 估计器重置次数 / Estimator resets
        mean_compute_us: 平均更新耗时(微秒) / Mean update time in microseconds
        final_angle_error: 最后一拍角度误差 / Angle error on the last tick (truth - estimate)
    """
    ticks: int
    resets: int
    mean_compute_us: float
    final_angle_error: Optional[float]


class FusionLoopController:
    """
    融合回路控制器 / Fusion loop controller

    Args:
        context: 回路上下文 / Loop context
        ticker: 周期节拍器, 默认使用配置周期 / Periodic ticker, defaults to the configured period
        stopwatch: 计算耗时计时器 / Compute-time stopwatch
    """

    def __init__(
        self,
        context: FusionContext,
        ticker: Optional[PeriodicTicker] = None,
        stopwatch: Optional[StopWatch] = None
    ):
        self.context = context
        self.ticker = ticker if ticker is not None else PeriodicTicker(context.config.period_ms)
        self.stopwatch = stopwatch if stopwatch is not None else StopWatch()

    def step(self) -> TickRecord:
        """
        执行一拍 / Execute one tick

        Returns:
            本拍记录 / The tick's record
        """
        ctx = self.context

        # 1. 真值推进与观测 / Advance truth and measure
        truth = ctx.truth.tick()

        # 2. 估计器更新 / Estimator update
        self.stopwatch.restart()
        ok = ctx.estimator.update(truth.measurement, ctx.control)

        # 3. 失败恢复 / Failure recovery
        if not ok:
            self._recover()

        # 4. 计算耗时 / Compute time
        compute_us = self.stopwatch.elapsed_us()

        record = TickRecord(
            index=ctx.tick_count,
            compute_us=compute_us,
            truth_state=truth.state,
            measurement=truth.measurement,
            clean_measurement=truth.clean_measurement,
            estimate_state=ctx.estimator.state_estimate,
            estimate_measurement=ctx.estimator.predicted_measurement(ctx.control),
            reset=not ok
        )

        # 5. 遥测 / Telemetry
        ctx.sink.emit(format_telemetry_line(record, ctx.config.telemetry_mode))
        if ctx.recorder is not None:
            ctx.recorder.append(record)

        ctx.tick_count += 1
        ctx.total_compute_us += compute_us
        ctx.last_record = record
        logger.debug(f"tick {record.index}: compute {compute_us:.1f}us, reset={record.reset}")
        return record

    def _recover(self) -> None:
        """零状态硬重置 / Hard reset to the zero state"""
        ctx = self.context
        ctx.state = LoopState.RECOVERING
        ctx.estimator.reset(
            zeros_state(),
            ctx.config.p_init,
            ctx.config.rv_init,
            ctx.config.rn_init
        )
        ctx.reset_count += 1
        logger.warning(f"Estimator update failed on tick {ctx.tick_count}, estimator reset")
        ctx.sink.emit(C.FAILURE_NOTICE)
        ctx.state = LoopState.RUNNING

    def run(self, max_ticks: Optional[int] = None) -> RunSummary:
        """
        运行回路 / Run the loop

        Args:
            max_ticks: 最大节拍数; 默认取配置值, None则无限运行 / Tick limit; defaults to the configured value, None runs forever

        Returns:
            运行摘要 / Run summary
        """
        ctx = self.context
        if max_ticks is None:
            max_ticks = ctx.config.max_ticks
        limit = None if max_ticks is None else ctx.tick_count + max_ticks

        self.ticker.reset()
        while limit is None or ctx.tick_count < limit:
            self.ticker.wait()
            self.step()
            self.ticker.reset()

        return self.summary()

    def summary(self) -> RunSummary:
        """
        运行摘要 / Run summary

        只统计已完成的节拍; 中断在某拍中间时, 真值可能已比最后记录多推进一拍。
        Covers completed ticks only. When a tick is interrupted midway the truth
        may already be one tick ahead of the last record, and is ignored here.
        """
        ctx = self.context
        mean_us = ctx.total_compute_us / ctx.tick_count if ctx.tick_count else 0.0
        final_error = None
        if ctx.last_record is not None:
            final_error = float(ctx.last_record.truth_state[0] - ctx.last_record.estimate_state[0])
        return RunSummary(
            ticks=ctx.tick_count,
            resets=ctx.reset_count,
            mean_compute_us=mean_us,
            final_angle_error=final_error
        )
