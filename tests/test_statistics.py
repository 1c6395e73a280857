import pytest

from traffic_sim.core.enums import EventKind
from traffic_sim.core.event import Event
from traffic_sim.core.recorder import TimeSeriesRecorder
from traffic_sim.core.source import TrafficSource
from traffic_sim.core.statistics import SimulationSummary, StatisticsAggregator


def test_time_weighted_average():
    stats = StatisticsAggregator()
    stats.update(Event(5.0, 0, EventKind.SOURCE_ON), None, 10.0)
    stats.update(Event(10.0, 1, EventKind.SOURCE_ON), None, 20.0)
    assert stats.average_traffic is None

    stats.finalize(20.0)

    assert stats.traffic_area == pytest.approx(250.0)
    assert stats.average_traffic == pytest.approx(12.5)
    assert stats.total_events == 2
    assert stats.peak_rate == 20.0
    assert stats.min_rate == 10.0


def test_finalize_only_applies_once():
    stats = StatisticsAggregator()
    stats.update(Event(5.0, 0, EventKind.SOURCE_ON), None, 10.0)
    stats.finalize(10.0)
    stats.finalize(40.0)
    assert stats.average_traffic == pytest.approx(5.0)
    assert stats.end_time == 10.0


def test_finalize_at_zero_gives_zero_average():
    stats = StatisticsAggregator()
    stats.finalize(0.0)
    assert stats.average_traffic == 0.0


def test_queue_stats_track_max_length_and_latest_drops():
    stats = StatisticsAggregator()
    stats.update_queue_stats(4.0, 1.0)
    stats.update_queue_stats(9.0, 3.0)
    stats.update_queue_stats(2.0, 3.0)
    assert stats.max_queue_length == 9.0
    assert stats.total_dropped == 3.0


def test_transitions_are_counted_per_source():
    stats = StatisticsAggregator()
    source = TrafficSource(3, 1.0, 2, 1, 2, 1, 0)
    stats.update(Event(1.0, 3, EventKind.SOURCE_ON), source, 1.0)
    stats.update(Event(2.0, 3, EventKind.SOURCE_OFF), source, 0.0)
    assert stats.transitions[3] == 2


def test_hurst_defaults_for_short_series():
    stats = StatisticsAggregator()
    for rate in (1.0, 2.0, 3.0):
        stats.record_rate_sample(rate)
    assert stats.compute_hurst() == 0.5
    assert stats.hurst_parameter == 0.5


def test_summary_requires_finalization():
    stats = StatisticsAggregator()
    with pytest.raises(RuntimeError):
        stats.summary()

    stats.update(Event(2.0, 0, EventKind.SOURCE_ON), None, 4.0)
    stats.update_queue_stats(3.0, 1.0)
    stats.finalize(4.0)
    summary = stats.summary()
    assert summary.as_row() == [1, 4.0, 2.0, 0.5, 3.0, 1.0]
    assert SimulationSummary.HEADER[0] == "Total Events"
    assert summary.to_dict()["hurst_parameter"] == 0.5


def test_recorder_add_segment_adds_points():
    recorder = TimeSeriesRecorder()
    recorder.add_segment(0.0, 5.0, 10.0)
    recorder.add_segment(5.0, 8.0, 20.0)
    assert recorder.as_points() == [(5.0, 10.0), (8.0, 20.0)]


def test_recorder_starts_at_zero():
    recorder = TimeSeriesRecorder()
    recorder.add_segment(2.0, 5.0, 10.0)
    assert recorder.as_points() == [(0.0, 10.0), (5.0, 10.0)]


def test_recorder_rejects_backwards_segment():
    recorder = TimeSeriesRecorder()
    with pytest.raises(ValueError):
        recorder.add_segment(5.0, 3.0, 10.0)


def test_recorder_finish():
    recorder = TimeSeriesRecorder()
    recorder.finish(10.0)
    assert recorder.as_points() == []

    recorder.record(5.0, 12.0)
    recorder.finish(10.0)
    assert recorder.as_points() == [(5.0, 12.0), (10.0, 12.0)]

    recorder.finish(10.0, 3.0)
    assert len(recorder.as_points()) == 2


def test_recorder_event_log():
    recorder = TimeSeriesRecorder()
    recorder.record_event(3, EventKind.SOURCE_ON, 5.5, 10.0)
    assert recorder.event_count == 1
    assert recorder.events[0].kind is EventKind.SOURCE_ON
    assert recorder.events[0].aggregate_rate == 10.0
