"""Command-line interface for portstat."""

import argparse
import sys
from pathlib import Path

from portstat import __version__
from portstat.core.config import IP_VERSIONS, OUTPUT_FORMATS, Settings, load_settings, settings_to_dict
from portstat.core.context import Context
from portstat.core.logging import RunLogger, get_log_path
from portstat.core.output import Output
from portstat.core.snapshot import take_snapshot
from portstat.errors import PortstatError


EXAMPLES = """\
examples:
  portstat
    Connect                                     UsedPorts  AvailablePorts
    192.168.170.132->192.168.170.132:22         2          28229
    127.0.0.1->127.0.0.1:22                     1          28230

  portstat --prom
    tcp_used_ports_total{connect="192.168.170.132->192.168.170.132:22"} 2
    tcp_available_ports_total{connect="192.168.170.132->192.168.170.132:22"} 28229
"""


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="portstat",
        description="Monitor TCP available ports: show the connection tuples "
        "closest to ephemeral port exhaustion",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"portstat {__version__}",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        metavar="SECONDS",
        help="Monitor interval in seconds (default: 3)",
    )
    parser.add_argument(
        "-n",
        "--number",
        type=int,
        metavar="N",
        help="Output the top N tuples with the fewest available ports (default: 10)",
    )
    parser.add_argument(
        "-p",
        "--prom",
        action="store_true",
        default=None,
        help="Output in Prometheus metrics format, once; --interval is ignored",
    )
    parser.add_argument(
        "-e",
        "--ip-version",
        "--ipVersion",
        dest="ip_version",
        type=int,
        choices=IP_VERSIONS,
        help="IP version, 4 or 6 (default: 0, meaning both)",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output format when not using --prom (default: plain)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML config file (overrides ~/.config/portstat/config.yaml and .portstat.yaml)",
    )
    parser.add_argument(
        "--log-dir",
        help="Directory for the JSONL run log (default: ~/var/log/portstat)",
    )
    parser.add_argument(
        "--no-log",
        dest="log",
        action="store_false",
        default=None,
        help="Do not write the run log",
    )
    return parser


def build_settings(args: argparse.Namespace) -> Settings:
    """Merge parsed arguments over the config files."""
    overrides = {
        "interval": args.interval,
        "number": args.number,
        "prom": args.prom,
        "ip_version": args.ip_version,
        "format": args.format,
        "log_dir": args.log_dir,
        "log": args.log,
    }
    return load_settings(overrides, config_path=args.config)


def monitor(settings: Settings, output: Output, context: Context, logger: RunLogger) -> int:
    """
    Take snapshots until done.

    One snapshot finishes (and is printed) before the next starts. With
    --prom exactly one snapshot is taken.

    Args:
        settings: Run settings
        output: Output helper
        context: Execution context
        logger: Run log

    Returns:
        0 = done, 1 = a snapshot failed
    """
    mode = settings.output_mode
    output.header(mode)

    while True:
        try:
            snapshot = take_snapshot(settings, context)
        except PortstatError as e:
            output.error(str(e))
            logger.error(str(e), error=type(e).__name__)
            return 1

        output.render(snapshot, mode)
        logger.info(
            "snapshot",
            families=list(snapshot.families),
            pool_size=snapshot.port_range.pool_size,
            tuples=len(snapshot.counters),
            tightest=snapshot.counters[0].to_dict() if snapshot.counters else None,
        )

        if settings.once:
            return 0

        context.sleep(settings.interval)


def run(argv: list[str], output: Output, context: Context) -> int:
    """
    Parse arguments and run the monitor.

    Args:
        argv: Command-line arguments
        output: Output helper
        context: Execution context

    Returns:
        0 = success, 1 = error, 2 = usage error, 130 = interrupted
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = build_settings(args)
    except PortstatError as e:
        output.error(str(e))
        return 2

    log_path = get_log_path(settings.log_path_base)
    logger = RunLogger(log_path, enabled=settings.log)
    try:
        logger.open()
    except OSError as e:
        # Monitoring continues without a run log
        output.error(f"cannot write log {log_path}: {e}; continuing without it")
        logger = RunLogger(enabled=False)

    with logger:
        logger.info("start", settings=settings_to_dict(settings))
        try:
            return monitor(settings, output, context, logger)
        except KeyboardInterrupt:
            logger.info("interrupted")
            return 130


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    return run(sys.argv[1:] if argv is None else argv, Output(), Context())


if __name__ == "__main__":
    sys.exit(main())
