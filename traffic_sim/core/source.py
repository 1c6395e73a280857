"""TrafficSource class for traffic simulation.

This module defines the TrafficSource class, an ON/OFF state machine that
samples a new sojourn time on every transition and emits the event that ends
it.
"""

from typing import Union

import numpy as np

from traffic_sim.core.enums import EventKind, TrafficModel
from traffic_sim.core.errors import InvalidParameter, UnknownModel
from traffic_sim.core.event import Event
from traffic_sim.traffic.generators import ParetoSampler, fgn_duration
from traffic_sim.utils.rng import make_stream


class TrafficSource:
    """Represents an ON/OFF traffic source.

    Every source starts OFF. While ON it contributes on_rate to the aggregate
    rate.

    Attributes:
        id: Unique identifier for the source.
        on_rate: Load contributed while the source is ON.
        is_on: Whether the source is currently ON.
        model: Duration model used for sojourn times.
        hurst: Hurst exponent associated with the FGN model.
        rng: Pseudo-random stream owned by this source.
    """

    def __init__(
        self,
        source_id: int,
        on_rate: float,
        alpha_on: float,
        xm_on: float,
        alpha_off: float,
        xm_off: float,
        seed: Union[int, np.random.Generator],
        model: TrafficModel = TrafficModel.PARETO,
        hurst: float = 0.8,
    ):
        """Initialize a traffic source in the OFF state.

        Args:
            source_id: Unique identifier for the source.
            on_rate: Load contributed while ON, must be >= 0.
            alpha_on: Pareto shape of ON periods.
            xm_on: Pareto scale of ON periods (FGN scale of ON periods).
            alpha_off: Pareto shape of OFF periods.
            xm_off: Pareto scale of OFF periods (FGN scale of OFF periods).
            seed: Seed for the source's stream, or a ready Generator.
            model: Duration model used for sojourn times.
            hurst: Hurst exponent, used only by the FGN model.

        Raises:
            InvalidParameter: If a rate, shape, scale or Hurst exponent is out
                of range.
            UnknownModel: If model is not a TrafficModel.
        """
        if not isinstance(model, TrafficModel):
            raise UnknownModel(f"Unknown traffic model: {model!r}")
        if on_rate < 0:
            raise InvalidParameter(f"on_rate must be >= 0, got {on_rate}")
        if model is TrafficModel.FRACTIONAL_GAUSSIAN_NOISE and not 0.0 < hurst < 1.0:
            raise InvalidParameter(f"hurst must be in (0, 1), got {hurst}")

        self._id = source_id
        self._on_rate = on_rate
        self._model = model
        self.hurst = hurst
        self.on_sampler = ParetoSampler(alpha_on, xm_on)
        self.off_sampler = ParetoSampler(alpha_off, xm_off)
        self.rng = seed if isinstance(seed, np.random.Generator) else make_stream(seed)
        self.is_on = False

    @property
    def id(self) -> int:
        return self._id

    @property
    def on_rate(self) -> float:
        return self._on_rate

    @property
    def model(self) -> TrafficModel:
        return self._model

    def schedule_initial_event(self, now: float) -> Event:
        """Schedule the first ON transition of a source that is still OFF.

        Args:
            now: Current simulation time.

        Returns:
            A SOURCE_ON event one OFF period after now.
        """
        dt = self.sample_off_duration()
        return Event(now + dt, self._id, EventKind.SOURCE_ON)

    def schedule_next_event(self, now: float) -> Event:
        """Toggle the state and schedule the end of the new sojourn.

        Args:
            now: Current simulation time.

        Returns:
            A SOURCE_OFF event if the source just turned ON, otherwise a
            SOURCE_ON event.
        """
        self.is_on = not self.is_on
        if self.is_on:
            return Event(now + self.sample_on_duration(), self._id, EventKind.SOURCE_OFF)
        return Event(now + self.sample_off_duration(), self._id, EventKind.SOURCE_ON)

    def sample_on_duration(self) -> float:
        return self._sample(self.on_sampler)

    def sample_off_duration(self) -> float:
        return self._sample(self.off_sampler)

    def _sample(self, sampler: ParetoSampler) -> float:
        if self._model is TrafficModel.PARETO:
            return sampler.sample(self.rng)
        return fgn_duration(sampler.xm, self.rng)

    def __repr__(self) -> str:
        state = "ON" if self.is_on else "OFF"
        return f"TrafficSource({self._id}, {state}, rate={self._on_rate}, {self._model.name})"
