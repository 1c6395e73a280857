"""Visualization utilities for traffic simulation.

This module provides functions for plotting the aggregate rate series and
the R/S regression behind the Hurst estimate.
"""

import os
from typing import Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from traffic_sim.utils.hurst import estimate_hurst, rs_points


def plot_time_series(
    points: Sequence[Tuple[float, float]],
    output_dir: str | None = None,
    filename: str = "aggregate_rate",
    show: bool = True,
) -> None:
    """Plot the aggregate rate as a step function.

    Args:
        points: (time, rate) breakpoints, each rate held up to its time.
        output_dir: Directory to save the plot in, or None.
        filename: File name without extension.
        show: Whether to display the plot when not saving it.
    """
    if not points:
        return

    times, rates = np.array(points).T

    fig, ax = plt.subplots(figsize=(12, 5))
    ax.step(times, rates, where="pre")
    ax.set_xlabel("Time")
    ax.set_ylabel("Aggregate Rate")
    ax.set_title("Aggregate Traffic Rate")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        fig.savefig(os.path.join(output_dir, f"{filename}.png"))
        plt.close(fig)
    elif show:
        plt.show()


def plot_rs_fit(
    series: Sequence[float],
    output_dir: str | None = None,
    filename: str = "rs_fit",
    show: bool = True,
) -> None:
    """Plot log(R/S) against log(window) with the fitted Hurst slope.

    Args:
        series: Rate samples used for the Hurst estimate.
        output_dir: Directory to save the plot in, or None.
        filename: File name without extension.
        show: Whether to display the plot when not saving it.
    """
    points = rs_points(series)
    if len(points) < 2:
        return

    x, y = np.array(points).T
    hurst = estimate_hurst(series)
    intercept = np.mean(y) - hurst * np.mean(x)

    fig, ax = plt.subplots(figsize=(6, 5))
    ax.scatter(x, y, label="mean R/S")
    ax.plot(x, hurst * x + intercept, color="orange", label=f"H = {hurst:.3f}")
    ax.plot(x, 0.5 * x + (np.mean(y) - 0.5 * np.mean(x)), "--", color="gray", label="H = 0.5")
    ax.set_xlabel("log(window)")
    ax.set_ylabel("log(R/S)")
    ax.set_title("Rescaled Range Analysis")
    ax.legend()

    plt.tight_layout()

    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        fig.savefig(os.path.join(output_dir, f"{filename}.png"))
        plt.close(fig)
    elif show:
        plt.show()
