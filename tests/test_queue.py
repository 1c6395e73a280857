import pytest

from traffic_sim.core.errors import InvalidParameter
from traffic_sim.core.queue import BoundedQueue


def test_overflow_is_dropped():
    queue = BoundedQueue(10, 3)
    queue.add_traffic(8)
    queue.add_traffic(5)
    assert queue.occupancy == 10
    assert queue.cumulative_dropped == 3
    assert queue.is_full


def test_service_drains_service_rate():
    queue = BoundedQueue(10, 3)
    queue.add_traffic(8)
    queue.service()
    assert queue.occupancy == 5


def test_service_never_goes_negative():
    queue = BoundedQueue(10, 3)
    queue.add_traffic(4)
    for _ in range(5):
        queue.service()
        assert queue.occupancy >= 0
    assert queue.occupancy == 0


def test_dropped_is_cumulative():
    queue = BoundedQueue(5, 1)
    queue.add_traffic(7)
    queue.service()
    queue.add_traffic(3)
    assert queue.cumulative_dropped == pytest.approx(4)
    assert queue.occupancy == 5


@pytest.mark.parametrize("capacity,rate", [(0, 1), (-1, 1), (10, -1)])
def test_invalid_parameters(capacity, rate):
    with pytest.raises(InvalidParameter):
        BoundedQueue(capacity, rate)
