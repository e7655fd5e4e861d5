"""
调度器测试 / Scheduler Tests
=========================
"""

import pytest

from ukf_fusion.loop import PeriodicTicker, StopWatch


class ManualClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class TestPeriodicTicker:
    """测试周期节拍器 / Test periodic ticker"""

    def test_sleeps_remaining_period(self):
        clock = ManualClock()
        ticker = PeriodicTicker(10, clock=clock, sleep=clock.sleep)
        clock.now += 0.004
        ticker.wait()
        assert clock.sleeps == [pytest.approx(0.006)]

    def test_no_sleep_when_overdue(self):
        clock = ManualClock()
        ticker = PeriodicTicker(10, clock=clock, sleep=clock.sleep)
        clock.now += 0.025
        ticker.wait()
        assert clock.sleeps == []

    def test_reset_restarts_period(self):
        clock = ManualClock()
        ticker = PeriodicTicker(10, clock=clock, sleep=clock.sleep)
        clock.now += 0.5
        ticker.reset()
        assert ticker.elapsed_ms() == 0.0
        clock.now += 0.003
        assert ticker.elapsed_ms() == pytest.approx(3.0)

    def test_drift_accumulates(self):
        """周期从重置开始计数 / Period counts from the reset, so work time adds drift"""
        clock = ManualClock()
        ticker = PeriodicTicker(10, clock=clock, sleep=clock.sleep)
        start = clock.now
        for _ in range(5):
            ticker.wait()
            clock.now += 0.002  # 每拍工作时间 / per-tick work
            ticker.reset()
        assert clock.now - start == pytest.approx(5 * 0.012)

    def test_invalid_period(self):
        with pytest.raises(ValueError, match="period_ms"):
            PeriodicTicker(0)


class TestStopWatch:
    """测试计时器 / Test stopwatch"""

    def test_microseconds(self):
        ticks = iter([0, 1_000, 6_000])
        watch = StopWatch(counter_ns=lambda: next(ticks))
        watch.restart()
        assert watch.elapsed_us() == 5.0
