# src/juice_plant/cli.py

"""
Command-line entry point: run the plants and print the totals.

    juice-plant --plants 2 --workers 2 --duration 10
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import PlantConfig
from .coordinator import build_plants, run_factory
from .progress import LoggingProgressListener

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = PlantConfig()
    parser = argparse.ArgumentParser(
        prog="juice-plant",
        description="Simulate orange juice plants with a shared worker pool")
    parser.add_argument("--plants", type=int, default=defaults.num_plants,
                        help="number of plants (default: %(default)s)")
    parser.add_argument("--workers", type=int, default=defaults.num_workers,
                        help="workers per plant (default: %(default)s)")
    parser.add_argument("--oranges-per-bottle", type=int,
                        default=defaults.items_per_unit,
                        help="oranges per bottle (default: %(default)s)")
    parser.add_argument("--duration", type=float,
                        default=defaults.run_duration,
                        help="seconds to run (default: %(default)s)")
    parser.add_argument("--arrival-delay", type=float,
                        default=defaults.arrival_delay,
                        help="seconds between oranges (default: %(default)s)")
    parser.add_argument("--poll-timeout", type=float,
                        default=defaults.poll_timeout,
                        help="worker queue wait in seconds (default: %(default)s)")
    parser.add_argument("--grace", type=float,
                        default=defaults.shutdown_grace,
                        help="worker shutdown grace in seconds "
                             "(default: %(default)s)")
    parser.add_argument("--time-unit", type=float,
                        default=defaults.time_unit,
                        help="seconds per stage cost unit (default: %(default)s)")
    parser.add_argument("--queue-capacity", type=int,
                        default=defaults.queue_capacity,
                        help="queue bound, 0 for unbounded (default: %(default)s)")
    parser.add_argument("--item-limit", type=int,
                        default=defaults.item_limit,
                        help="oranges per plant before it stops producing "
                             "(default: no limit)")
    parser.add_argument("--sample-interval", type=float,
                        default=defaults.sample_interval,
                        help="seconds between throughput samples "
                             "(default: %(default)s)")
    parser.add_argument("--timeline-limit", type=int,
                        default=defaults.timeline_limit,
                        help="samples kept per plant (default: %(default)s)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--plot", metavar="PATH",
                        help="save a throughput plot (needs the analysis extra)")
    return parser


def config_from_args(args: argparse.Namespace) -> PlantConfig:
    return PlantConfig(
        num_plants=args.plants,
        num_workers=args.workers,
        items_per_unit=args.oranges_per_bottle,
        run_duration=args.duration,
        arrival_delay=args.arrival_delay,
        poll_timeout=args.poll_timeout,
        shutdown_grace=args.grace,
        time_unit=args.time_unit,
        queue_capacity=args.queue_capacity,
        item_limit=args.item_limit,
        sample_interval=args.sample_interval,
        timeline_limit=args.timeline_limit,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)-7s %(threadName)s %(name)s: %(message)s")

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    plants = build_plants(config, LoggingProgressListener())
    report = run_factory(config, plants=plants)
    for line in report.summary_lines():
        print(line)

    if args.plot:
        _save_plot(plants, args.plot)
    return 0


def _save_plot(plants, path: str):
    from .analysis.plotting import plot_throughput_over_time
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(12, 6))
    for plant in plants:
        plot_throughput_over_time(plant.stats, ax=ax, label=plant.name)
    fig.savefig(path)
    plt.close(fig)
    log.info(f"Throughput plot saved to {path}")


if __name__ == "__main__":
    sys.exit(main())
