"""Pseudo-random stream helpers.

Every traffic source owns an independent numpy Generator so that a run is
reproducible from a single base seed and no stream is ever shared.
"""

import numpy as np


def source_seed(base_seed: int, index: int) -> int:
    """Derive the seed of a single source.

    Args:
        base_seed: Per-run seed basis.
        index: Position of the source in the population.

    Returns:
        The seed for that source.
    """
    return base_seed + index


def make_stream(seed: int) -> np.random.Generator:
    """Create an independent pseudo-random stream.

    Args:
        seed: The initial seed value for the generator.

    Returns:
        A numpy Generator seeded with the given value.
    """
    return np.random.default_rng(seed)
