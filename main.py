#!/usr/bin/env python3
"""Command line entry point for the ON/OFF traffic simulator."""

import argparse
import logging
import os

from traffic_sim.config import SimulatorConfig, load_config, save_config
from traffic_sim.core.errors import InvalidParameter, UnknownModel
from traffic_sim.core.simulator import SimulationManager
from traffic_sim.utils.metrics import (
    save_events_to_csv,
    save_metrics_to_json,
    save_summary_to_csv,
    save_time_series_to_csv,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Self-similar ON/OFF Traffic Simulator")
    parser.add_argument("--config", help="JSON or key=value parameter file")
    parser.add_argument("--total-time", type=float, default=1000.0)
    parser.add_argument("--sources", type=int, default=50, help="Number of sources")
    parser.add_argument("--alpha-on", type=float, default=1.5)
    parser.add_argument("--xm-on", type=float, default=1.0)
    parser.add_argument("--alpha-off", type=float, default=1.5)
    parser.add_argument("--xm-off", type=float, default=1.0)
    parser.add_argument("--on-rate", type=float, default=1.0)
    parser.add_argument("--model", default="pareto", help="pareto or fgn")
    parser.add_argument("--hurst", type=float, default=0.8)
    parser.add_argument("--seed", type=int, default=1234)
    parser.add_argument("--queue-capacity", type=float, default=100.0)
    parser.add_argument("--service-rate", type=float, default=5.0)
    parser.add_argument(
        "--sample-interval",
        type=float,
        default=None,
        help="Sample the rate every interval instead of after every event",
    )
    parser.add_argument("--output-dir", default="results")
    parser.add_argument("--plot", action="store_true", help="Save plots of the run")
    parser.add_argument("--progress", action="store_true", help="Print progress")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def config_from_args(args: argparse.Namespace) -> SimulatorConfig:
    if args.config:
        return load_config(args.config)
    return SimulatorConfig(
        total_time=args.total_time,
        num_sources=args.sources,
        alpha_on=args.alpha_on,
        xm_on=args.xm_on,
        alpha_off=args.alpha_off,
        xm_off=args.xm_off,
        on_rate=args.on_rate,
        model=args.model,
        hurst=args.hurst,
        seed=args.seed,
        queue_capacity=args.queue_capacity,
        service_rate=args.service_rate,
        sample_interval=args.sample_interval,
    )


def main(argv=None):
    """Main function to run a simulation"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except (InvalidParameter, UnknownModel) as e:
        parser.error(str(e))

    print("\n=== Running Traffic Simulation ===")
    print(f"model={config.model.name} sources={config.num_sources} totalTime={config.total_time}")

    simulator = SimulationManager.from_config(config)
    summary = simulator.run(config.total_time, updates=args.progress)

    print(f"\nTotal Events: {summary.total_events}")
    print(f"Peak Traffic: {summary.peak_traffic:.2f}")
    print(f"Average Traffic: {summary.average_traffic:.4f}")
    print(f"Hurst Parameter: {summary.hurst_parameter:.4f}")
    print(f"Max Queue Length: {summary.max_queue_length:.2f}")
    print(f"Dropped Packets: {summary.total_dropped_packets:.2f}")

    output_dir = args.output_dir
    os.makedirs(output_dir, exist_ok=True)
    save_config(config, os.path.join(output_dir, "config.json"))
    save_summary_to_csv(summary, os.path.join(output_dir, "summary.csv"))
    save_metrics_to_json(summary, os.path.join(output_dir, "summary.json"))
    save_events_to_csv(simulator.recorder.events, os.path.join(output_dir, "events.csv"))
    save_time_series_to_csv(
        simulator.recorder.as_points(), os.path.join(output_dir, "time_series.csv")
    )
    print(f"Results written to {output_dir}/")

    if args.plot:
        from traffic_sim.utils.visualization import plot_rs_fit, plot_time_series

        plot_time_series(simulator.recorder.as_points(), output_dir=output_dir)
        plot_rs_fit(simulator.statistics.rate_samples, output_dir=output_dir)

    return summary


if __name__ == "__main__":
    main()
