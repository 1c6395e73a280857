import numpy as np
import pytest

from traffic_sim.core.errors import InvalidParameter
from traffic_sim.traffic.fgn import FGNGenerator, fgn_autocovariance
from traffic_sim.utils.hurst import estimate_hurst


def lag1_autocorrelation(x):
    x = np.asarray(x) - np.mean(x)
    return np.dot(x[:-1], x[1:]) / np.dot(x, x)


def test_autocovariance_values():
    gamma = fgn_autocovariance(0.5, 5)
    assert gamma == pytest.approx([1.0, 0.0, 0.0, 0.0, 0.0])
    gamma = fgn_autocovariance(0.8, 3)
    assert gamma[0] == pytest.approx(1.0)
    assert gamma[1] == pytest.approx(0.5 * (2**1.6 - 2))


@pytest.mark.parametrize("method", ["hosking", "davies-harte"])
def test_next_wraps_around(method):
    n = 16
    gen = FGNGenerator(n, 0.7, np.random.default_rng(1), method=method)
    first_pass = [gen.next() for _ in range(n)]
    second_pass = [gen.next() for _ in range(n)]
    assert second_pass == first_pass


@pytest.mark.parametrize("method", ["hosking", "davies-harte"])
@pytest.mark.parametrize("hurst", [0.1, 0.5, 0.75, 0.95])
def test_values_are_finite(method, hurst):
    gen = FGNGenerator(64, hurst, np.random.default_rng(99), method=method)
    values = [gen.next() for _ in range(128)]
    assert np.all(np.isfinite(values))


@pytest.mark.parametrize("method", ["hosking", "davies-harte"])
def test_same_seed_same_sequence(method):
    gen1 = FGNGenerator(10, 0.8, np.random.default_rng(123), method=method)
    gen2 = FGNGenerator(10, 0.8, np.random.default_rng(123), method=method)
    assert [gen1.next() for _ in range(10)] == [gen2.next() for _ in range(10)]


def test_different_seeds_differ():
    gen1 = FGNGenerator(10, 0.7, np.random.default_rng(10))
    gen2 = FGNGenerator(10, 0.7, np.random.default_rng(20))
    assert not np.array_equal(gen1.samples, gen2.samples)


def test_single_sample_generator():
    gen = FGNGenerator(1, 0.8, np.random.default_rng(4))
    assert len(gen) == 1
    assert gen.next() == gen.next()


def test_samples_table_is_read_only_copy():
    gen = FGNGenerator(8, 0.8, np.random.default_rng(4))
    table = gen.samples
    table[0] = 1e9
    assert gen.next() != 1e9


@pytest.mark.parametrize("method", ["hosking", "davies-harte"])
def test_lag1_correlation_matches_target(method):
    hurst = 0.7
    gen = FGNGenerator(4096, hurst, np.random.default_rng(2718), method=method)
    expected = fgn_autocovariance(hurst, 2)[1]
    assert lag1_autocorrelation(gen.samples) == pytest.approx(expected, abs=0.08)


def test_persistent_noise_has_higher_hurst_than_white_noise():
    fgn = FGNGenerator(4096, 0.9, np.random.default_rng(11)).samples
    white = np.random.default_rng(11).standard_normal(4096)
    assert estimate_hurst(fgn) > estimate_hurst(white)


@pytest.mark.parametrize(
    "length,hurst,method",
    [(0, 0.8, "hosking"), (10, 0.0, "hosking"), (10, 1.0, "hosking"), (10, 0.8, "fft")],
)
def test_invalid_parameters(length, hurst, method):
    with pytest.raises(InvalidParameter):
        FGNGenerator(length, hurst, np.random.default_rng(0), method=method)
