"""Simulation manager for traffic simulation.

This module defines the SimulationManager class, which owns the event queue,
the simulated clock, the source population, the congestion model and the
statistics, and runs the main event loop.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import simpy

from traffic_sim.config import SimulatorConfig
from traffic_sim.core.enums import EventKind
from traffic_sim.core.errors import InvalidParameter
from traffic_sim.core.event import TICK_SOURCE_ID, Event
from traffic_sim.core.queue import BoundedQueue
from traffic_sim.core.recorder import TimeSeriesRecorder
from traffic_sim.core.source import TrafficSource
from traffic_sim.core.statistics import SimulationSummary, StatisticsAggregator
from traffic_sim.utils.rng import source_seed

logger = logging.getLogger(__name__)


class SimulationManager:
    """Discrete-event simulation of an ON/OFF source population.

    Events are scheduled on a SimPy environment, which keeps them in a heap
    ordered by time; events with equal times are dispatched in the order
    they were scheduled.

    Attributes:
        env: SimPy environment holding the event queue and the clock.
        sources: Sources in the order they were added, indexed by id.
        queue: Congestion model fed with the aggregate rate.
        statistics: Run statistics.
        recorder: Piecewise-constant rate series and event log.
        sample_interval: Spacing of TICK rate samples, or None to sample the
            rate after every event.
        aggregate_rate: Sum of on_rate over the sources that are ON.
    """

    def __init__(
        self,
        queue_capacity: float = 100.0,
        service_rate: float = 5.0,
        sample_interval: Optional[float] = None,
        env: Optional[simpy.Environment] = None,
    ):
        """Initialize the simulation manager.

        Args:
            queue_capacity: Capacity of the bounded queue.
            service_rate: Load drained from the queue after every event.
            sample_interval: Spacing of TICK rate samples, or None.
            env: SimPy environment, a fresh one is created if omitted.
        """
        if sample_interval is not None and sample_interval <= 0:
            raise InvalidParameter(
                f"sample_interval must be > 0, got {sample_interval}"
            )

        self.env = env if env is not None else simpy.Environment()
        self.sources: List[TrafficSource] = []
        self._source_index: Dict[int, TrafficSource] = {}
        self.queue = BoundedQueue(queue_capacity, service_rate)
        self.statistics = StatisticsAggregator()
        self.recorder = TimeSeriesRecorder()
        self.sample_interval = sample_interval

        self.aggregate_rate = 0.0
        self._active_sources = 0
        self._now = self.env.now
        self._pending: Dict[simpy.events.Timeout, Tuple[int, Event]] = {}
        self._scheduled = 0
        self._seeded = False
        self._started = False
        self._finished = False
        self.last_event: Optional[Event] = None

        self.hooks: Dict[str, List[Callable[..., Any]]] = {
            "event_processed": [],  # a source event was consumed
            "sim_end": [],  # the simulation ends
        }

    @classmethod
    def from_config(cls, config: SimulatorConfig) -> "SimulationManager":
        """Build a manager and its source population from a configuration.

        Source i is seeded with config.seed + i.

        Args:
            config: Validated simulator configuration.

        Returns:
            A manager ready to run.
        """
        manager = cls(
            queue_capacity=config.queue_capacity,
            service_rate=config.service_rate,
            sample_interval=config.sample_interval,
        )
        for i in range(config.num_sources):
            manager.add_source(
                TrafficSource(
                    i,
                    config.on_rate,
                    config.alpha_on,
                    config.xm_on,
                    config.alpha_off,
                    config.xm_off,
                    source_seed(config.seed, i),
                    model=config.model,
                    hurst=config.hurst,
                )
            )
        return manager

    @property
    def now(self) -> float:
        return self._now

    def add_source(self, source: TrafficSource) -> None:
        """Add a source to the population.

        Raises:
            ValueError: If a source with the same id was already added.
        """
        if source.id in self._source_index:
            raise ValueError(f"Source {source.id} already exists")
        self.sources.append(source)
        self._source_index[source.id] = source

    def get_source(self, source_id: int) -> Optional[TrafficSource]:
        return self._source_index.get(source_id)

    def schedule(self, event: Event) -> None:
        """Put an event on the event queue.

        Args:
            event: Event to schedule.

        Raises:
            ValueError: If the event lies before the environment's clock.
        """
        delay = event.time - self.env.now
        if delay < 0:
            raise ValueError(f"Cannot schedule {event} before t={self.env.now}")
        timeout = self.env.timeout(delay, value=event)
        timeout.callbacks.append(self._on_event)
        self._pending[timeout] = (self._scheduled, event)
        self._scheduled += 1

    def pending_events(self) -> List[Event]:
        """Return the queued events in dispatch order."""
        ordered = sorted(self._pending.values(), key=lambda p: (p[1].time, p[0]))
        return [event for _, event in ordered]

    def seed_initial_events(self) -> None:
        """Schedule the first ON transition of every source."""
        for source in self.sources:
            self.schedule(source.schedule_initial_event(self._now))
        self._seeded = True

    def handle(self, event: Event) -> bool:
        """Apply a source event to its source and to the aggregate rate.

        Events for unknown sources and stale events (ON for a source that is
        already ON, OFF for one that is already OFF) are ignored.

        Args:
            event: The event to apply.

        Returns:
            True if the source changed state.
        """
        if event.kind is EventKind.TICK:
            return False

        source = self.get_source(event.source_id)
        if source is None:
            logger.debug("Ignoring %s for unknown source", event)
            return False

        if event.kind is EventKind.SOURCE_ON and not source.is_on:
            self.schedule(source.schedule_next_event(self._now))
            self.aggregate_rate += source.on_rate
            self._active_sources += 1
            return True

        if event.kind is EventKind.SOURCE_OFF and source.is_on:
            self.schedule(source.schedule_next_event(self._now))
            self._active_sources -= 1
            if self._active_sources == 0:
                self.aggregate_rate = 0.0
            else:
                self.aggregate_rate -= source.on_rate
            return True

        logger.debug("Ignoring stale %s", event)
        return False

    def step(self) -> Optional[Event]:
        """Consume the earliest queued event.

        Returns:
            The processed event, or None if the queue was empty.

        Raises:
            RuntimeError: If the run has already finished.
        """
        if self._finished:
            raise RuntimeError("Simulation has already finished")
        if not self._pending:
            return None
        self.env.step()
        return self.last_event

    def _on_event(self, timeout: simpy.events.Timeout) -> None:
        _, event = self._pending.pop(timeout)
        self.last_event = event
        if event.kind is EventKind.TICK:
            self._tick(event)
        else:
            self._process(event)

    def _tick(self, event: Event) -> None:
        self._now = event.time
        self.statistics.record_rate_sample(self.aggregate_rate)
        if self.sample_interval is not None:
            self.schedule(
                Event(event.time + self.sample_interval, TICK_SOURCE_ID, EventKind.TICK)
            )

    def _process(self, event: Event) -> None:
        # close the segment the previous rate was in force for
        self.recorder.add_segment(self._now, event.time, self.aggregate_rate)
        self._now = event.time

        self.handle(event)

        self.queue.add_traffic(self.aggregate_rate)
        self.queue.service()
        self.statistics.update_queue_stats(
            self.queue.occupancy, self.queue.cumulative_dropped
        )
        self.statistics.update(
            event, self.get_source(event.source_id), self.aggregate_rate
        )
        if self.sample_interval is None:
            self.statistics.record_rate_sample(self.aggregate_rate)

        self.recorder.record_event(
            event.source_id, event.kind, event.time, self.aggregate_rate
        )
        logger.debug("%s -> aggregate rate %.4f", event, self.aggregate_rate)
        self.call_hooks(
            "event_processed",
            event.source_id,
            event.kind,
            event.time,
            self.aggregate_rate,
        )

    def register_hook(self, event_type: str, callback: Callable[..., Any]) -> None:
        """Register a callback function for a specific event type.

        Args:
            event_type: The type of event to register for.
            callback: The function to call when the event occurs.
        """
        if event_type not in self.hooks:
            raise ValueError(f"Unknown hook type: {event_type}")
        self.hooks[event_type].append(callback)

    def call_hooks(self, event_type: str, *args: Any, **kwargs: Any) -> None:
        """Call all registered callbacks for the given event type.

        Args:
            event_type: The type of event that occurred.
            *args, **kwargs: Arguments to pass to the callback functions.
        """
        if event_type in self.hooks:
            for callback in self.hooks[event_type]:
                callback(*args, **kwargs)

    def run(self, until_time: float, updates: bool = False) -> SimulationSummary:
        """Run the simulation up to a time horizon.

        Events later than until_time are discarded without being processed.

        Args:
            until_time: Simulation horizon, must be positive.
            updates: Whether to print progress lines.

        Returns:
            The end-of-run summary.

        Raises:
            InvalidParameter: If until_time is not positive.
            RuntimeError: If the manager has already been run.
        """
        if until_time <= 0:
            raise InvalidParameter(f"until_time must be > 0, got {until_time}")
        if self._started:
            raise RuntimeError("Simulation has already been run")
        self._started = True

        logger.info(
            "Running %d sources until t=%s", len(self.sources), until_time
        )
        self.recorder.record(self._now, self.aggregate_rate)
        if not self._seeded:
            self.seed_initial_events()
        if self.sample_interval is not None:
            self.schedule(
                Event(self._now + self.sample_interval, TICK_SOURCE_ID, EventKind.TICK)
            )

        count = 10
        interval = until_time / count
        counter = 0

        while self.env.peek() <= until_time:
            self.env.step()
            if updates:
                while counter < count and self._now >= (counter + 1) * interval:
                    counter += 1
                    progress = counter / count * 100
                    print(f"Progress: {progress:.2f}%", end="\r")

        if self._pending:
            logger.debug("Discarding %d events past the horizon", len(self._pending))
            self._pending.clear()

        self.statistics.finalize(until_time)
        self.statistics.compute_hurst()
        self.recorder.finish(until_time, self.aggregate_rate)
        self._finished = True

        summary = self.statistics.summary()
        logger.info(
            "Finished at t=%s after %d events", until_time, summary.total_events
        )
        self.call_hooks("sim_end", summary)
        return summary
