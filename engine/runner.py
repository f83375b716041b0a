"""
Motor Monitor - Headless Runner
===============================

Command-line driver for the sampling service.

Usage:
------
motor-monitor                          # 5 s run with default config
motor-monitor --duration 10 --print    # print every snapshot
motor-monitor --config my.yaml --interval-ms 50 --seed 1 --log-level DEBUG

Author: Motor Monitor Team
Date: October 19, 2026
"""

import argparse
import json
import sys
import time
from typing import List, Optional

from utils.config import ConfigError, load_monitor_config, set_config_value
from utils.logging import get_logger, log_snapshot, log_statistics, setup_logging

from .service import MonitoringService

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="motor-monitor",
        description="Run the simulated single-axis telemetry source.",
    )
    parser.add_argument("--config", help="YAML file layered over the defaults")
    parser.add_argument("--duration", type=float, default=5.0,
                        help="Run time in seconds (default: 5)")
    parser.add_argument("--interval-ms", type=int, default=None,
                        help="Tick interval in milliseconds")
    parser.add_argument("--seed", type=int, default=None,
                        help="Noise seed for a reproducible run")
    parser.add_argument("--log-level", default=None,
                        help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--print", dest="print_snapshots", action="store_true",
                        help="Print each snapshot as a JSON line on stdout")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the ``motor-monitor`` console script.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    if args.duration <= 0:
        print("error: --duration must be > 0", file=sys.stderr)
        return 2

    try:
        config = load_monitor_config(args.config)
        if args.interval_ms is not None:
            set_config_value(config, "engine.interval_ms", args.interval_ms)
        if args.seed is not None:
            set_config_value(config, "engine.seed", args.seed)
        if args.log_level is not None:
            set_config_value(config, "logging.level", args.log_level.upper())
        service = MonitoringService(config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    log_config = config["logging"]
    setup_logging(
        log_config["dir"],
        level=log_config["level"],
        console_output=log_config["console_output"],
        file_output=log_config["file_output"],
    )

    def on_status(snapshot):
        log_snapshot(snapshot)
        if args.print_snapshots:
            print(json.dumps(snapshot.to_dict()), flush=True)

    with service:
        service.subscribe(on_status)
        service.start_monitoring()
        try:
            time.sleep(args.duration)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        service.stop_monitoring()
        log_statistics(service.stats.to_dict())

    return 0


if __name__ == "__main__":
    sys.exit(main())
