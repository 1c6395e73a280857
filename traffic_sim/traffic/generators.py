"""Duration generators for traffic sources.

This module provides the samplers a source uses to draw its ON and OFF
sojourn times: Pareto inverse-transform sampling and the Gaussian-magnitude
durations of the FGN model.
"""

from typing import Optional, Union

import numpy as np

from traffic_sim.core.errors import InvalidParameter

# Smallest duration the FGN model may return, keeps events strictly ordered.
MIN_FGN_DURATION = 1e-9


def pareto_sample(
    alpha: float,
    xm: float,
    rng: np.random.Generator,
    size: Optional[int] = None,
) -> Union[float, np.ndarray]:
    """Draw from a Pareto(alpha, xm) distribution by inverse transform.

    U is drawn from (0, 1] as 1 - rng.random() so that the inverse CDF
    xm * U^(-1/alpha) never divides by zero.

    Args:
        alpha: Shape parameter (how heavy the tail is).
        xm: Scale parameter, the minimum possible value.
        rng: Pseudo-random stream to draw from.
        size: Number of draws, or None for a single float.

    Returns:
        A sample (or array of samples), every value >= xm.

    Raises:
        InvalidParameter: If alpha or xm is not strictly positive.
    """
    if alpha <= 0 or xm <= 0:
        raise InvalidParameter(f"alpha and xm must be > 0, got alpha={alpha}, xm={xm}")

    u = 1.0 - rng.random(size)
    samples = xm * u ** (-1.0 / alpha)
    if size is None:
        return float(samples)
    return samples


class ParetoSampler:
    """Pareto sampler with parameters validated once at construction.

    Attributes:
        alpha: Shape parameter.
        xm: Scale parameter.
    """

    def __init__(self, alpha: float, xm: float):
        if alpha <= 0 or xm <= 0:
            raise InvalidParameter(
                f"alpha and xm must be > 0, got alpha={alpha}, xm={xm}"
            )
        self.alpha = alpha
        self.xm = xm

    def sample(self, rng: np.random.Generator) -> float:
        """Draw one duration from the stream."""
        return pareto_sample(self.alpha, self.xm, rng)

    def mean(self) -> float:
        """Theoretical mean, infinite when alpha <= 1."""
        if self.alpha <= 1:
            return float("inf")
        return self.alpha * self.xm / (self.alpha - 1)

    def median(self) -> float:
        return self.xm * 2 ** (1.0 / self.alpha)

    def __repr__(self) -> str:
        return f"ParetoSampler(alpha={self.alpha}, xm={self.xm})"


def fgn_duration(scale: float, rng: np.random.Generator) -> float:
    """Draw a FGN-model duration as a scaled Gaussian magnitude.

    Args:
        scale: Per-state scale (the state's xm).
        rng: Pseudo-random stream to draw from.

    Returns:
        scale * |N(0, 1)|, floored at MIN_FGN_DURATION.
    """
    if scale <= 0:
        raise InvalidParameter(f"scale must be > 0, got {scale}")
    return max(scale * abs(float(rng.standard_normal())), MIN_FGN_DURATION)
