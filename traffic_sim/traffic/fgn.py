"""Fractional Gaussian noise generation.

This module builds a finite table of correlated Gaussian samples with a target
Hurst exponent and serves it cyclically. Two constructions are available:

- ``hosking``: Durbin-Levinson / Hosking recursion, exact, O(N^2).
- ``davies-harte``: circulant embedding with an FFT, exact, O(N log N).
"""

import logging

import numpy as np

from traffic_sim.core.errors import InvalidParameter

logger = logging.getLogger(__name__)

# Floors applied to variances before taking square roots.
MIN_VARIANCE = 1e-12

METHODS = ("hosking", "davies-harte")


def fgn_autocovariance(hurst: float, n: int) -> np.ndarray:
    """Autocovariance of unit-variance fractional Gaussian noise.

    gamma(k) = 0.5 * (|k+1|^2H - 2|k|^2H + |k-1|^2H) for k = 0..n-1.

    Args:
        hurst: Hurst exponent in (0, 1).
        n: Number of lags.

    Returns:
        Array of n autocovariances, gamma(0) floored at MIN_VARIANCE.
    """
    k = np.arange(n, dtype=float)
    two_h = 2.0 * hurst
    gamma = 0.5 * (
        np.abs(k + 1) ** two_h - 2.0 * np.abs(k) ** two_h + np.abs(k - 1) ** two_h
    )
    if n > 0:
        gamma[0] = max(gamma[0], MIN_VARIANCE)
    return gamma


def hosking(n: int, hurst: float, rng: np.random.Generator) -> np.ndarray:
    """Generate n FGN samples with the Hosking recursion.

    Each sample is drawn from its Gaussian distribution conditional on the
    previous ones. The best linear predictor coefficients are updated with
    the Durbin-Levinson recursion using two buffers swapped every step.

    Args:
        n: Number of samples.
        hurst: Hurst exponent in (0, 1).
        rng: Pseudo-random stream to draw innovations from.

    Returns:
        Array of n correlated samples.
    """
    gamma = fgn_autocovariance(hurst, n)
    x = np.empty(n)
    x[0] = np.sqrt(gamma[0]) * rng.standard_normal()
    if n == 1:
        return x

    phi_prev = np.zeros(n - 1)
    phi = np.zeros(n - 1)
    variance = gamma[0]

    for k in range(1, n):
        # reflection coefficient phi_kk
        tau = np.dot(phi_prev[: k - 1], gamma[k - 1 : 0 : -1])
        phi_kk = (gamma[k] - tau) / variance

        phi[: k - 1] = phi_prev[: k - 1] - phi_kk * phi_prev[: k - 1][::-1]
        phi[k - 1] = phi_kk
        variance = max(variance * (1.0 - phi_kk * phi_kk), MIN_VARIANCE)

        mean = np.dot(phi[:k], x[k - 1 :: -1])
        x[k] = mean + np.sqrt(variance) * rng.standard_normal()

        phi_prev, phi = phi, phi_prev

    return x


def davies_harte(n: int, hurst: float, rng: np.random.Generator) -> np.ndarray:
    """Generate n FGN samples by circulant embedding.

    Args:
        n: Number of samples.
        hurst: Hurst exponent in (0, 1).
        rng: Pseudo-random stream to draw the spectral weights from.

    Returns:
        Array of n correlated samples.
    """
    if n == 1:
        return np.array([rng.standard_normal()])

    gamma = fgn_autocovariance(hurst, n + 1)
    row = np.concatenate([gamma, gamma[n - 1 : 0 : -1]])
    m = row.size

    eigenvalues = np.fft.fft(row).real
    if eigenvalues.min() < -1e-8:
        logger.warning(
            "Circulant embedding is not non-negative definite (min eigenvalue %.3g)",
            eigenvalues.min(),
        )
    eigenvalues = np.clip(eigenvalues, 0.0, None)

    weights = np.zeros(m, dtype=complex)
    weights[0] = np.sqrt(eigenvalues[0] / m) * rng.standard_normal()
    weights[n] = np.sqrt(eigenvalues[n] / m) * rng.standard_normal()
    z = rng.standard_normal((n - 1, 2))
    scale = np.sqrt(eigenvalues[1:n] / (2 * m))
    weights[1:n] = scale * (z[:, 0] + 1j * z[:, 1])
    weights[n + 1 :] = np.conj(weights[n - 1 : 0 : -1])

    return np.fft.fft(weights).real[:n]


class FGNGenerator:
    """Cyclic source of fractional Gaussian noise samples.

    The sample table is generated once at construction. next() returns the
    samples round-robin, so call N + k returns the same value as call k.
    A fresh sequence requires a new generator.

    Attributes:
        length: Number of samples in the table.
        hurst: Target Hurst exponent.
        method: Construction used for the table.
    """

    def __init__(
        self,
        length: int,
        hurst: float,
        rng: np.random.Generator,
        method: str = "hosking",
    ):
        """Initialize the generator and build the sample table.

        Args:
            length: Number of samples before the sequence repeats.
            hurst: Hurst exponent in (0, 1).
            rng: Pseudo-random stream consumed during construction.
            method: Either "hosking" or "davies-harte".

        Raises:
            InvalidParameter: If length < 1, hurst is outside (0, 1) or the
                method is unknown.
        """
        if length < 1:
            raise InvalidParameter(f"length must be >= 1, got {length}")
        if not 0.0 < hurst < 1.0:
            raise InvalidParameter(f"hurst must be in (0, 1), got {hurst}")
        if method not in METHODS:
            raise InvalidParameter(
                f"Unknown FGN method: {method} (expected one of {', '.join(METHODS)})"
            )

        self.length = length
        self.hurst = hurst
        self.method = method
        build = hosking if method == "hosking" else davies_harte
        self._samples = build(length, hurst, rng)
        self._samples.setflags(write=False)
        self._index = 0

    def next(self) -> float:
        """Return the next sample, wrapping around after length calls."""
        value = float(self._samples[self._index])
        self._index = (self._index + 1) % self.length
        return value

    @property
    def samples(self) -> np.ndarray:
        return self._samples.copy()

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        return f"FGNGenerator(length={self.length}, hurst={self.hurst}, method={self.method!r})"
