"""
Fusion Trace Plots
==================

Plots truth vs estimate angle and the x-measurement channel for a recorded run.
"""

import pathlib
from typing import Union

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from .telemetry import TraceRecorder
from . import constants as C

# Colorblind-friendly palette (Tol bright scheme)
COLORS = {
    'truth': '#4477AA',      # Blue
    'estimate': '#228833',   # Green
    'noisy': '#BBBBBB',      # Grey
    'reset': '#EE6677',      # Red
    'grid': '#E5E5E5',
}


def plot_trace(recorder: TraceRecorder, save_path: Union[str, pathlib.Path]) -> pathlib.Path:
    """Render angle and x-position traces, marking estimator resets.

    The time axis is tick index times SS_DT, the physics step, not the wall-clock period.
    """
    data = recorder.as_arrays()
    t = np.arange(len(recorder)) * C.SS_DT

    fig, (ax_theta, ax_x) = plt.subplots(2, 1, figsize=(10, 7), sharex=True)

    ax_theta.plot(t, data['truth_state'][:, 0], color=COLORS['truth'], label='truth θ')
    ax_theta.plot(t, data['estimate_state'][:, 0], color=COLORS['estimate'],
                  linestyle='--', label='UKF θ')
    ax_theta.set_ylabel('θ [rad]')

    ax_x.plot(t, data['measurement'][:, 0], color=COLORS['noisy'], linewidth=0.8, label='noisy x')
    ax_x.plot(t, data['clean_measurement'][:, 0], color=COLORS['truth'], label='truth x')
    ax_x.plot(t, data['estimate_measurement'][:, 0], color=COLORS['estimate'],
              linestyle='--', label='UKF x')
    ax_x.set_ylabel('x [m]')
    ax_x.set_xlabel('time [s]')

    for ax in (ax_theta, ax_x):
        for reset_t in t[data['reset']]:
            ax.axvline(reset_t, color=COLORS['reset'], linewidth=1.0, alpha=0.7)
        ax.grid(True, color=COLORS['grid'])
        ax.legend(loc='upper right')

    fig.tight_layout()
    save_path = pathlib.Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return save_path
