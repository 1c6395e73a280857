import csv
import json

from traffic_sim.core.enums import EventKind
from traffic_sim.core.recorder import EventRecord
from traffic_sim.core.statistics import SimulationSummary
from traffic_sim.utils.metrics import (
    save_events_to_csv,
    save_metrics_to_json,
    save_summary_to_csv,
    save_time_series_to_csv,
)

SUMMARY = SimulationSummary(12, 4.0, 1.5, 0.72, 9.0, 3.0)


def read_rows(path):
    with open(path, newline="") as f:
        return list(csv.reader(f))


def test_summary_csv(tmp_path):
    path = tmp_path / "out" / "summary.csv"
    save_summary_to_csv(SUMMARY, str(path))
    rows = read_rows(path)
    assert rows[0] == [
        "Total Events",
        "Peak Traffic",
        "Average Traffic",
        "Hurst Parameter",
        "Max Queue Length",
        "Dropped Packets",
    ]
    assert rows[1] == ["12", "4.0", "1.5", "0.72", "9.0", "3.0"]


def test_events_csv(tmp_path):
    path = tmp_path / "events.csv"
    save_events_to_csv(
        [
            EventRecord(1, EventKind.SOURCE_ON, 2.0, 5.0),
            EventRecord(2, EventKind.SOURCE_OFF, 3.5, 10.0),
        ],
        str(path),
    )
    rows = read_rows(path)
    assert rows[0] == ["sourceId", "eventType", "eventTime", "currentAggregateRate"]
    assert rows[1] == ["1", "SOURCE_ON", "2.0", "5.0"]
    assert rows[2] == ["2", "SOURCE_OFF", "3.5", "10.0"]


def test_time_series_csv(tmp_path):
    path = tmp_path / "series.csv"
    save_time_series_to_csv([(0.0, 0.0), (5.0, 2.0)], str(path))
    assert read_rows(path) == [["time", "totalAggregateRate"], ["0.0", "0.0"], ["5.0", "2.0"]]


def test_summary_json(tmp_path):
    path = tmp_path / "summary.json"
    save_metrics_to_json(SUMMARY, str(path))
    data = json.loads(path.read_text())
    assert data["total_events"] == 12
    assert data["hurst_parameter"] == 0.72
