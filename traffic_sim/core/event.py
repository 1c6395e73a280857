"""Event class for traffic simulation.

This module defines the Event class, which represents a scheduled state
change of a traffic source (or a periodic sampling tick).
"""

from dataclasses import dataclass

from traffic_sim.core.enums import EventKind

TICK_SOURCE_ID = -1


@dataclass(frozen=True)
class Event:
    """Represents a scheduled simulation event.

    Events sort by time only; the scheduler dispatches equal-time events in
    the order they were scheduled.

    Attributes:
        time: Simulation time at which the event fires.
        source_id: Identifier of the owning source, or TICK_SOURCE_ID.
        kind: Kind of the event.
    """

    time: float
    source_id: int
    kind: EventKind

    def __lt__(self, other: "Event") -> bool:
        return self.time < other.time

    def __str__(self) -> str:
        return f"Event(t={self.time:.4f}, {self.kind.name}, source={self.source_id})"
