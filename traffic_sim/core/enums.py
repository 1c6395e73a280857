"""Enumerations for traffic simulation.

This module defines enumerations used throughout the simulator.
"""

from enum import Enum


class EventKind(Enum):
    """Enum for the kinds of scheduled events.

    Attributes:
        SOURCE_ON: A source leaves its idle period and starts emitting.
        SOURCE_OFF: A source ends its active period.
        TICK: Periodic sampling event not owned by any source.
    """

    SOURCE_ON = 1
    SOURCE_OFF = 2
    TICK = 3


class TrafficModel(Enum):
    """Enum for the duration models a source can draw from.

    Attributes:
        PARETO: Heavy-tailed Pareto sojourn times.
        FRACTIONAL_GAUSSIAN_NOISE: Gaussian-magnitude sojourn times.
    """

    PARETO = 1
    FRACTIONAL_GAUSSIAN_NOISE = 2
