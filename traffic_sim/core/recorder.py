"""TimeSeriesRecorder class for traffic simulation.

This module records the aggregate rate as a piecewise-constant series of
(time, rate) breakpoints, together with a log of every processed event.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from traffic_sim.core.enums import EventKind


@dataclass(frozen=True)
class EventRecord:
    """One processed event as exposed to event-log writers.

    Attributes:
        source_id: Identifier of the source that owned the event.
        kind: Kind of the event.
        time: Time at which the event was processed.
        aggregate_rate: Aggregate rate right after the event.
    """

    source_id: int
    kind: EventKind
    time: float
    aggregate_rate: float


class TimeSeriesRecorder:
    """Records breakpoints of the aggregate rate and the event log.

    A breakpoint (t, r) means the rate r was in force during the segment
    that ends at t.
    """

    def __init__(self) -> None:
        self.points: List[Tuple[float, float]] = []
        self.events: List[EventRecord] = []
        self.last_time = 0.0
        self.current_rate: Optional[float] = None

    def record(self, time: float, rate: float) -> None:
        """Append a breakpoint."""
        self.points.append((time, rate))
        self.last_time = time
        self.current_rate = rate

    def add_segment(self, t0: float, t1: float, rate: float) -> None:
        """Record a segment [t0, t1] over which the rate was constant.

        Args:
            t0: Segment start.
            t1: Segment end.
            rate: Rate in force during the segment.

        Raises:
            ValueError: If t1 < t0.
        """
        if t1 < t0:
            raise ValueError(f"Segment end {t1} precedes its start {t0}")
        if not self.points and t0 > 0:
            self.points.append((0.0, rate))
        self.record(t1, rate)

    def finish(self, time: float, rate: Optional[float] = None) -> None:
        """Close the series at the end of the run.

        Args:
            time: End time of the run.
            rate: Rate in force during the last segment, defaults to the rate
                of the last breakpoint.
        """
        if self.current_rate is None:
            return
        if rate is None:
            rate = self.current_rate
        if self.points[-1][0] < time:
            self.record(time, rate)

    def record_event(
        self, source_id: int, kind: EventKind, time: float, aggregate_rate: float
    ) -> None:
        """Append an entry to the event log."""
        self.events.append(EventRecord(source_id, kind, time, aggregate_rate))

    @property
    def event_count(self) -> int:
        return len(self.events)

    def as_points(self) -> List[Tuple[float, float]]:
        return list(self.points)
