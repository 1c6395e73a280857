"""Statistics aggregation for traffic simulation.

This module collects summary statistics over a run:

- total_events: number of processed source events
- peak_rate: maximum aggregate rate observed after an event
- average_traffic: time-weighted average of the aggregate rate

The average uses the rectangle rule. For every interval between two events
the rate that was in force before the later event is integrated:

    traffic_area += last_rate * (event.time - last_event_time)

and at the end of the run average_traffic = traffic_area / end_time.
"""

import logging
from collections import Counter
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from traffic_sim.core.event import Event
from traffic_sim.core.source import TrafficSource
from traffic_sim.utils.hurst import estimate_hurst

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationSummary:
    """End-of-run summary fields, in CSV column order."""

    total_events: int
    peak_traffic: float
    average_traffic: float
    hurst_parameter: float
    max_queue_length: float
    total_dropped_packets: float

    HEADER = (
        "Total Events",
        "Peak Traffic",
        "Average Traffic",
        "Hurst Parameter",
        "Max Queue Length",
        "Dropped Packets",
    )

    def as_row(self) -> List[Any]:
        return [
            self.total_events,
            self.peak_traffic,
            self.average_traffic,
            self.hurst_parameter,
            self.max_queue_length,
            self.total_dropped_packets,
        ]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class StatisticsAggregator:
    """Accumulates run statistics.

    Attributes:
        total_events: Number of events passed to update().
        peak_rate: Maximum post-event aggregate rate.
        min_rate: Minimum post-event aggregate rate, None before any event.
        traffic_area: Time integral of the aggregate rate.
        last_event_time: Time of the last update.
        last_rate: Aggregate rate in force since last_event_time.
        rate_samples: Sampled aggregate rates fed to the Hurst estimator.
        max_queue_length: Largest queue occupancy observed.
        total_dropped: Latest cumulative drop count of the queue.
        hurst_parameter: Estimated Hurst exponent, None until computed.
        average_traffic: Time-weighted average rate, None until finalized.
        transitions: Number of events per source id.
    """

    def __init__(self) -> None:
        self.total_events = 0
        self.peak_rate = 0.0
        self.min_rate: Optional[float] = None
        self.traffic_area = 0.0
        self.last_event_time = 0.0
        self.last_rate = 0.0
        self.rate_samples: List[float] = []
        self.max_queue_length = 0.0
        self.total_dropped = 0.0
        self.hurst_parameter: Optional[float] = None
        self.average_traffic: Optional[float] = None
        self.end_time: Optional[float] = None
        self.transitions: Counter = Counter()

    def update(
        self,
        event: Event,
        source: Optional[TrafficSource],
        aggregate_rate: float,
    ) -> None:
        """Account for a processed event.

        Args:
            event: The event that was processed.
            source: The source owning the event, or None if unresolved.
            aggregate_rate: Aggregate rate immediately after the event.
        """
        duration = event.time - self.last_event_time
        if duration > 0:
            self.traffic_area += self.last_rate * duration

        self.last_event_time = event.time
        self.last_rate = aggregate_rate

        self.total_events += 1
        self.peak_rate = max(self.peak_rate, aggregate_rate)
        if self.min_rate is None or aggregate_rate < self.min_rate:
            self.min_rate = aggregate_rate
        if source is not None:
            self.transitions[source.id] += 1

    def finalize(self, end_time: float) -> None:
        """Close the last interval and compute the time-weighted average.

        Only the first call has an effect.

        Args:
            end_time: Final simulation time.
        """
        if self.average_traffic is not None:
            return

        duration = end_time - self.last_event_time
        if duration > 0:
            self.traffic_area += self.last_rate * duration

        self.end_time = end_time
        self.average_traffic = self.traffic_area / end_time if end_time > 0 else 0.0

    def record_rate_sample(self, rate: float) -> None:
        self.rate_samples.append(rate)

    def compute_hurst(self) -> float:
        """Estimate the Hurst exponent of the sampled rates and store it."""
        self.hurst_parameter = estimate_hurst(self.rate_samples)
        logger.info(
            "Hurst parameter %.4f from %d rate samples",
            self.hurst_parameter,
            len(self.rate_samples),
        )
        return self.hurst_parameter

    def update_queue_stats(self, queue_length: float, dropped: float) -> None:
        """Track the longest queue and the latest cumulative drop count."""
        if queue_length > self.max_queue_length:
            self.max_queue_length = queue_length
        self.total_dropped = dropped

    @property
    def is_finalized(self) -> bool:
        return self.average_traffic is not None

    def summary(self) -> SimulationSummary:
        """Return the end-of-run summary.

        Raises:
            RuntimeError: If finalize() has not been called yet.
        """
        if not self.is_finalized:
            raise RuntimeError("Statistics have not been finalized")
        hurst = self.hurst_parameter
        if hurst is None:
            hurst = self.compute_hurst()
        return SimulationSummary(
            total_events=self.total_events,
            peak_traffic=self.peak_rate,
            average_traffic=self.average_traffic,
            hurst_parameter=hurst,
            max_queue_length=self.max_queue_length,
            total_dropped_packets=self.total_dropped,
        )
