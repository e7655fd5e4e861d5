"""
递推无迹卡尔曼滤波器 / Recursive Unscented Kalman Filter
=====================================================

逐拍运行的无迹卡尔曼滤波器: 每次调用 ``update`` 完成一次预测和一次校正。
Tick-by-tick Unscented Kalman Filter: each ``update`` call performs one
prediction and one correction.

Key Features / 主要特性:
- 通过 ``NonlinearModel`` 协议与物理模型解耦 / Decoupled from the physics via ``NonlinearModel``
- JIT编译的更新步骤 / JIT-compiled update step
- 数值失败检测, 失败时保持原状态 / Numerical failure detection, state kept on failure
- 硬重置到已知状态和协方差 / Hard reset to a known state and covariance
"""

import jax
import jax.numpy as jnp
from jax import vmap
from jax.scipy.linalg import cho_solve
from functools import partial
from typing import Callable, Optional, Tuple
import chex

from .config import UKFConfig, UKFState, NoiseCovariances
from ...core.types import (
    CovarianceMatrix, MeasurementVector, NonlinearModel, Scalar, StateVector, as_vector
)
from ...models.pendulum import PendulumModel
from ...utils.logger import get_logger
from ... import constants as C

logger = get_logger(__name__)


class UnscentedKalmanFilter:
    """
    递推无迹卡尔曼滤波器 / Recursive Unscented Kalman Filter

    协方差初始化为 P_INIT·I, 过程噪声 Rv_INIT·I, 观测噪声 Rn_INIT·I。
    Covariance is seeded as P_INIT·I, process noise Rv_INIT·I and measurement
    noise Rn_INIT·I.

    Args:
        model: 非线性系统模型 / Nonlinear system model
        initial_state: 初始状态估计 / Initial state estimate
        p_init: 初始协方差缩放 / Initial covariance scale
        rv_init: 过程噪声缩放 / Process noise scale
        rn_init: 观测噪声缩放 / Measurement noise scale
        config: UKF配置参数 / UKF configuration parameters
    """

    def __init__(
        self,
        model: NonlinearModel,
        initial_state: chex.Array,
        p_init: float = C.P_INIT,
        rv_init: float = C.Rv_INIT,
        rn_init: float = C.Rn_INIT,
        config: Optional[UKFConfig] = None
    ):
        self.model = model
        self.config = config if config is not None else UKFConfig()

        # 维度 / Dimensions
        self.n_state = model.n_state
        self.n_obs = model.n_obs
        self.n_control = model.n_control
        self.n_sigma = 2 * self.n_state + 1

        # 计算UKF参数 / Compute UKF parameters
        kappa = self.config.kappa if self.config.kappa is not None else 3 - self.n_state
        self.lambda_param = self.config.alpha**2 * (self.n_state + kappa) - self.n_state
        self.gamma = jnp.sqrt(self.n_state + self.lambda_param)

        # 预计算权重 / Precompute weights
        self.weights_mean, self.weights_cov = self._compute_weights()

        self._update_step_jit = jax.jit(self._update_step)
        self._observe_jit = jax.jit(model.predict_measurement)

        self.reset(initial_state, p_init, rv_init, rn_init)
        self._warm_up()

    def _warm_up(self) -> None:
        """预编译更新和观测函数, 结果丢弃 / Compile update and observation ahead of the first tick, results discarded"""
        y = jnp.zeros(self.n_obs, dtype=jnp.float64)
        u = jnp.zeros(self.n_control, dtype=jnp.float64)
        jax.block_until_ready(self._update_step_jit(self._state, y, u, self._noise))
        jax.block_until_ready(self._observe_jit(self._state.mean, u))

    def _compute_weights(self) -> Tuple[chex.Array, chex.Array]:
        """计算sigma点权重 / Compute sigma point weights"""
        w_m = jnp.zeros(self.n_sigma)
        w_m = w_m.at[0].set(self.lambda_param / (self.n_state + self.lambda_param))
        w_m = w_m.at[1:].set(0.5 / (self.n_state + self.lambda_param))

        w_c = jnp.zeros(self.n_sigma)
        w_c = w_c.at[0].set(
            self.lambda_param / (self.n_state + self.lambda_param) +
            (1 - self.config.alpha**2 + self.config.beta)
        )
        w_c = w_c.at[1:].set(0.5 / (self.n_state + self.lambda_param))

        return w_m, w_c

    # ------------------------------------------------------------------
    # Public interface / 公共接口
    # ------------------------------------------------------------------

    def reset(
        self,
        state: chex.Array,
        p_scale: Scalar,
        process_noise_scale: Scalar,
        measurement_noise_scale: Scalar
    ) -> None:
        """
        硬重置 / Hard reset

        丢弃全部滤波历史, 重新设定状态、协方差和噪声。
        Discards all filter history and re-seeds state, covariance and noise.
        """
        mean = as_vector(state, self.n_state, "state")
        self._state = UKFState(
            mean=mean,
            covariance=p_scale * jnp.eye(self.n_state),
            log_likelihood=jnp.zeros((), dtype=jnp.float64)
        )
        self._noise = NoiseCovariances(
            process=process_noise_scale * jnp.eye(self.n_state),
            measurement=measurement_noise_scale * jnp.eye(self.n_obs)
        )

    def update(self, measurement: MeasurementVector, control: chex.Array) -> bool:
        """
        预测并校正一拍 / Predict and correct one tick

        Args:
            measurement: 当前观测 [n_obs] / Current measurement
            control: 控制输入 [n_control] / Control input

        Returns:
            更新是否成功; 失败时内部状态不变 / Whether the update succeeded; state is unchanged on failure
        """
        y = as_vector(measurement, self.n_obs, "measurement")
        u = as_vector(control, self.n_control, "control")

        new_state, ok = self._update_step_jit(self._state, y, u, self._noise)
        if not bool(ok):
            logger.debug("UKF update produced non-finite values, keeping previous state")
            return False

        self._state = new_state
        return True

    @property
    def state_estimate(self) -> StateVector:
        """当前状态估计 (只读) / Current state estimate (read-only)"""
        return self._state.mean

    @property
    def covariance(self) -> CovarianceMatrix:
        """当前状态协方差 / Current state covariance"""
        return self._state.covariance

    @property
    def log_likelihood(self) -> float:
        """自上次重置以来的累积对数似然 / Accumulated log-likelihood since last reset"""
        return float(self._state.log_likelihood)

    @property
    def noise(self) -> NoiseCovariances:
        return self._noise

    def predicted_measurement(self, control: chex.Array) -> MeasurementVector:
        """当前估计在观测空间的投影 / Measurement-space projection of the current estimate"""
        u = as_vector(control, self.n_control, "control")
        return self._observe_jit(self._state.mean, u)

    # ------------------------------------------------------------------
    # Core numerics / 核心数值计算
    # ------------------------------------------------------------------

    @partial(jax.jit, static_argnums=(0,))
    def _generate_sigma_points(self, mean: chex.Array, cov: chex.Array) -> chex.Array:
        """
        生成sigma点 / Generate sigma points

        协方差非正定时Cholesky分解返回NaN, 由调用方检测。
        Cholesky yields NaN for a non-positive-definite covariance; the caller detects it.
        """
        cov = 0.5 * (cov + cov.T)
        sqrt_cov = jnp.linalg.cholesky(cov)
        scaled_sqrt = self.gamma * sqrt_cov

        # [中心点，正偏差，负偏差] / [center, positive deviations, negative deviations]
        return jnp.concatenate([
            mean[None, :],
            mean[None, :] + scaled_sqrt.T,
            mean[None, :] - scaled_sqrt.T
        ], axis=0)

    def _unscented_transform(
        self,
        sigma_points: chex.Array,
        transform_fn: Callable,
        control: chex.Array,
        noise_cov: chex.Array
    ) -> Tuple[chex.Array, chex.Array, chex.Array]:
        """
        无迹变换 / Unscented transform

        Returns:
            (均值, 协方差, 变换后的sigma点) / (mean, covariance, transformed sigma points)
        """
        transformed = vmap(lambda s: transform_fn(s, control))(sigma_points)

        mean = jnp.sum(self.weights_mean[:, None] * transformed, axis=0)

        diff = transformed - mean[None, :]
        cov = jnp.sum(
            self.weights_cov[:, None, None] *
            diff[:, :, None] * diff[:, None, :],
            axis=0
        )

        return mean, cov + noise_cov, transformed

    def _update_step(
        self,
        state: UKFState,
        measurement: chex.Array,
        control: chex.Array,
        noise: NoiseCovariances
    ) -> Tuple[UKFState, chex.Array]:
        """UKF预测+校正步骤 / UKF prediction + correction step"""
        # 预测 / Predict
        sigma_points = self._generate_sigma_points(state.mean, state.covariance)
        pred_mean, pred_cov, _ = self._unscented_transform(
            sigma_points, self.model.predict_state, control, noise.process
        )

        # 观测无迹变换 / Observation unscented transform
        sigma_points = self._generate_sigma_points(pred_mean, pred_cov)
        pred_obs, obs_cov, obs_points = self._unscented_transform(
            sigma_points, self.model.predict_measurement, control, noise.measurement
        )

        # 交叉协方差 / Cross covariance
        state_diff = sigma_points - pred_mean[None, :]
        obs_diff = obs_points - pred_obs[None, :]
        cross_cov = jnp.sum(
            self.weights_cov[:, None, None] *
            state_diff[:, :, None] * obs_diff[:, None, :],
            axis=0
        )

        # 卡尔曼增益 K = Pxy Pyy^-1 / Kalman gain
        obs_chol = jnp.linalg.cholesky(0.5 * (obs_cov + obs_cov.T))
        kalman_gain = cho_solve((obs_chol, True), cross_cov.T).T

        innovation = measurement - pred_obs
        updated_mean = pred_mean + kalman_gain @ innovation
        updated_cov = pred_cov - kalman_gain @ obs_cov @ kalman_gain.T
        updated_cov = 0.5 * (updated_cov + updated_cov.T)

        log_likelihood = self._compute_log_likelihood(innovation, obs_chol)

        ok = (
            jnp.all(jnp.isfinite(updated_mean)) &
            jnp.all(jnp.isfinite(updated_cov)) &
            jnp.isfinite(log_likelihood)
        )

        return UKFState(
            mean=updated_mean,
            covariance=updated_cov,
            log_likelihood=state.log_likelihood + log_likelihood
        ), ok

    def _compute_log_likelihood(
        self,
        innovation: chex.Array,
        innovation_chol: chex.Array
    ) -> chex.Scalar:
        """计算对数似然 / Compute log-likelihood"""
        dim = innovation.shape[0]
        logdet = 2.0 * jnp.sum(jnp.log(jnp.diag(innovation_chol)))
        quad_form = innovation @ cho_solve((innovation_chol, True), innovation)
        return -0.5 * (dim * jnp.log(2 * jnp.pi) + logdet + quad_form)


# 便利函数 / Convenience functions

def create_pendulum_ukf(
    initial_state: Optional[chex.Array] = None,
    params=None,
    p_init: float = C.P_INIT,
    rv_init: float = C.Rv_INIT,
    rn_init: float = C.Rn_INIT,
    config: Optional[UKFConfig] = None
) -> UnscentedKalmanFilter:
    """
    创建单摆系统UKF / Create pendulum system UKF

    Args:
        initial_state: 初始估计, 默认为故意错误的角度 / Initial estimate, defaults to the deliberately wrong angle
        params: 单摆物理参数 / Pendulum physical parameters
        p_init, rv_init, rn_init: 调参 / Tuning scalars
        config: UKF配置 / UKF configuration

    Returns:
        配置好的UKF实例 / Configured UKF instance
    """
    if initial_state is None:
        initial_state = jnp.array([C.ESTIMATE_INITIAL_ANGLE, 0.0])

    return UnscentedKalmanFilter(
        model=PendulumModel(params),
        initial_state=initial_state,
        p_init=p_init,
        rv_init=rv_init,
        rn_init=rn_init,
        config=config
    )
