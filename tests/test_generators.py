import numpy as np
import pytest

from traffic_sim.core.errors import InvalidParameter
from traffic_sim.traffic.generators import (
    MIN_FGN_DURATION,
    ParetoSampler,
    fgn_duration,
    pareto_sample,
)


@pytest.mark.parametrize("alpha,xm", [(0.5, 1.0), (1.5, 2.0), (3.0, 0.1)])
def test_pareto_samples_never_below_scale(alpha, xm):
    rng = np.random.default_rng(1)
    samples = [pareto_sample(alpha, xm, rng) for _ in range(10_000)]
    assert min(samples) >= xm


def test_pareto_mean_converges():
    rng = np.random.default_rng(2024)
    samples = pareto_sample(2.0, 1.0, rng, size=500_000)
    assert samples.mean() == pytest.approx(2.0, rel=0.05)


def test_pareto_median_converges():
    rng = np.random.default_rng(7)
    samples = pareto_sample(1.5, 1.0, rng, size=200_000)
    assert np.median(samples) == pytest.approx(2 ** (1 / 1.5), rel=0.05)


def test_pareto_identical_streams_give_identical_sequences():
    rng1 = np.random.default_rng(123)
    rng2 = np.random.default_rng(123)
    seq1 = [pareto_sample(1.2, 3.0, rng1) for _ in range(100)]
    seq2 = [pareto_sample(1.2, 3.0, rng2) for _ in range(100)]
    assert seq1 == seq2


def test_pareto_scalar_and_vector_draws_match():
    scalar = pareto_sample(2.5, 1.0, np.random.default_rng(5))
    vector = pareto_sample(2.5, 1.0, np.random.default_rng(5), size=3)
    assert isinstance(scalar, float)
    assert vector[0] == pytest.approx(scalar)


@pytest.mark.parametrize("alpha,xm", [(0.0, 1.0), (-1.0, 1.0), (1.5, 0.0), (1.5, -2.0)])
def test_pareto_rejects_non_positive_parameters(alpha, xm):
    rng = np.random.default_rng(0)
    state = rng.bit_generator.state
    with pytest.raises(InvalidParameter):
        pareto_sample(alpha, xm, rng)
    assert rng.bit_generator.state == state
    with pytest.raises(InvalidParameter):
        ParetoSampler(alpha, xm)


def test_pareto_sampler_moments():
    sampler = ParetoSampler(2.0, 1.0)
    assert sampler.mean() == pytest.approx(2.0)
    assert sampler.median() == pytest.approx(2 ** 0.5)
    assert ParetoSampler(1.0, 1.0).mean() == float("inf")


def test_fgn_duration_is_positive_and_scaled():
    rng = np.random.default_rng(3)
    durations = [fgn_duration(2.0, rng) for _ in range(1000)]
    assert min(durations) >= MIN_FGN_DURATION
    # E|N(0,1)| = sqrt(2/pi)
    assert np.mean(durations) == pytest.approx(2.0 * np.sqrt(2 / np.pi), rel=0.1)
