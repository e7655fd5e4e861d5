"""Command line entry point for the pendulum UKF fusion loop."""
from typing import Optional

import click

from .core.types import FusionConfig, TelemetryMode
from .loop import FusionContext, FusionLoopController
from .telemetry import TraceRecorder
from .utils.logger import setup_logger, log_info
from . import constants as C


@click.group()
def cli():
    """Pendulum UKF fusion loop."""


@cli.command('run')
@click.option('--ticks', '-n', type=int, default=None,
              help='Number of ticks to run (default: run until interrupted). On Ctrl-C the '
                   'summary covers completed ticks only')
@click.option('--mode', '-m', type=click.Choice([m.value for m in TelemetryMode]),
              default=TelemetryMode.ANGLE.value, show_default=True,
              help='Telemetry field selection')
@click.option('--period-ms', type=float, default=C.SS_DT_MILIS, show_default=True,
              help='Wall-clock tick period in milliseconds. The physics step stays at SS_DT '
                   '(%g s) regardless, and the trace plot time axis uses SS_DT' % C.SS_DT)
@click.option('--seed', type=int, default=C.DEFAULT_SEED, show_default=True,
              help='Measurement noise seed')
@click.option('--noise', type=float, default=C.MEASUREMENT_NOISE_AMPLITUDE, show_default=True,
              help='Uniform noise bound on the measured x position [m]')
@click.option('--log-level', default='INFO', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False))
@click.option('--plot', type=click.Path(dir_okay=False), default=None,
              help='Save a trace plot to this path when the run ends')
def run_command(ticks: Optional[int], mode: str, period_ms: float, seed: int,
                noise: float, log_level: str, plot: Optional[str]):
    """Run the estimation loop and stream telemetry to stdout."""
    setup_logger(level=log_level)
    try:
        config = FusionConfig(
            period_ms=period_ms,
            telemetry_mode=mode,
            noise_amplitude=noise,
            seed=seed,
            max_ticks=ticks,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    recorder = TraceRecorder() if plot else None
    context = FusionContext.from_config(config, recorder=recorder)
    controller = FusionLoopController(context)

    log_info(f"Starting fusion loop: period={period_ms}ms mode={mode} seed={seed}")
    try:
        controller.run()
    except KeyboardInterrupt:
        log_info("Interrupted, stopping loop")

    summary = controller.summary()
    log_info(
        f"Ticks: {summary.ticks}, resets: {summary.resets}, "
        f"mean compute: {summary.mean_compute_us:.1f}us, "
        f"final angle error: {summary.final_angle_error}"
    )

    if recorder is not None and len(recorder):
        from .visualization import plot_trace
        path = plot_trace(recorder, plot)
        log_info(f"Trace plot saved to {path}")


def main():
    cli()


if __name__ == '__main__':
    main()
