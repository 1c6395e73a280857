"""Metrics utilities for traffic simulation.

This module writes simulation results to disk: the end-of-run summary, the
event log and the piecewise-constant aggregate rate series.
"""

import csv
import json
import os
from typing import Iterable, Sequence, Tuple

from traffic_sim.core.recorder import EventRecord
from traffic_sim.core.statistics import SimulationSummary

EVENT_LOG_HEADER = ["sourceId", "eventType", "eventTime", "currentAggregateRate"]
TIME_SERIES_HEADER = ["time", "totalAggregateRate"]


def _ensure_parent(filename: str) -> None:
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)


def save_summary_to_csv(
    summary: SimulationSummary, filename: str = "results/summary.csv"
) -> None:
    """Save the end-of-run summary as a one-row CSV file.

    Args:
        summary: Summary of the run.
        filename: Output filename.
    """
    _ensure_parent(filename)

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(SimulationSummary.HEADER)
        writer.writerow(summary.as_row())


def save_events_to_csv(
    records: Iterable[EventRecord], filename: str = "results/events.csv"
) -> None:
    """Save the event log to a CSV file.

    Args:
        records: Processed events in processing order.
        filename: Output filename.
    """
    _ensure_parent(filename)

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(EVENT_LOG_HEADER)
        for record in records:
            writer.writerow(
                [record.source_id, record.kind.name, record.time, record.aggregate_rate]
            )


def save_time_series_to_csv(
    points: Sequence[Tuple[float, float]], filename: str = "results/time_series.csv"
) -> None:
    """Save the aggregate rate breakpoints to a CSV file.

    Args:
        points: (time, rate) breakpoints.
        filename: Output filename.
    """
    _ensure_parent(filename)

    with open(filename, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(TIME_SERIES_HEADER)
        writer.writerows(points)


def save_metrics_to_json(
    summary: SimulationSummary, filename: str = "results/summary.json"
) -> None:
    """Save the end-of-run summary to a JSON file.

    Args:
        summary: Summary of the run.
        filename: Output filename.
    """
    _ensure_parent(filename)

    with open(filename, "w") as f:
        json.dump(summary.to_dict(), f, indent=2)
