"""BoundedQueue class for traffic simulation.

This module defines the BoundedQueue class, a fluid FIFO buffer that
receives the aggregate rate as arriving load and drains at a fixed service
rate.
"""

from traffic_sim.core.errors import InvalidParameter


class BoundedQueue:
    """Represents a finite network buffer.

    Attributes:
        capacity: Maximum occupancy of the buffer.
        service_rate: Load drained per service() call.
        occupancy: Current occupancy, always within [0, capacity].
        cumulative_dropped: Total load that did not fit in the buffer.
    """

    def __init__(self, capacity: float, service_rate: float):
        """Initialize an empty buffer.

        Args:
            capacity: Maximum occupancy, must be positive.
            service_rate: Load drained per service() call, must be >= 0.

        Raises:
            InvalidParameter: If capacity or service_rate is out of range.
        """
        if capacity <= 0:
            raise InvalidParameter(f"capacity must be > 0, got {capacity}")
        if service_rate < 0:
            raise InvalidParameter(f"service_rate must be >= 0, got {service_rate}")
        self.capacity = capacity
        self.service_rate = service_rate
        self.occupancy = 0.0
        self.cumulative_dropped = 0.0

    def add_traffic(self, arriving: float) -> None:
        """Add arriving load, dropping whatever exceeds the free space.

        Args:
            arriving: Non-negative load arriving at the buffer.
        """
        space = self.capacity - self.occupancy
        if arriving <= space:
            self.occupancy += arriving
        else:
            self.occupancy = self.capacity
            self.cumulative_dropped += arriving - space

    def service(self) -> None:
        """Drain up to service_rate from the buffer."""
        self.occupancy -= min(self.occupancy, self.service_rate)

    @property
    def is_full(self) -> bool:
        return self.occupancy >= self.capacity

    def __repr__(self) -> str:
        return (
            f"BoundedQueue({self.occupancy:.2f}/{self.capacity}, "
            f"service={self.service_rate}, dropped={self.cumulative_dropped:.2f})"
        )
