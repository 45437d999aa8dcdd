"""
Main entry point for flick2influx.
Parses options, creates the metrics writer, runs the selected recording routine
and maps failures to an exit status.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from flick2influx import __version__
from flick2influx.database.writer import MetricsWriter
from flick2influx.exceptions import Flick2InfluxError
from flick2influx.logging_config import setup_logging
from flick2influx.models.options import RunOptions
from flick2influx.services.recorder import Recorder


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flick2influx",
        description="Record Flick Electric prices and power usage in InfluxDB.",
    )
    parser.add_argument("-u", "--username", required=True, help="Flick Electric username")
    parser.add_argument("-p", "--password", required=True, help="Flick Electric password")
    parser.add_argument("--influx-uri", required=True,
                        help="URI of the influx server to record stats in")
    parser.add_argument("--influx-database", required=True,
                        help="The database on the influx server to record stats in")
    parser.add_argument("--influx-username",
                        help="Optional - The username to use when writing stats to influx")
    parser.add_argument("--influx-password",
                        help="Optional - The password corresponding to the influx username")
    parser.add_argument("-m", "--mode", required=True,
                        help='The mode of operation: "price" for current pricing, "usage-simple" for usage '
                             'data without pricing, or "usage-detailed" for usage including the price paid')
    parser.add_argument("--look-back-days", type=int,
                        help="For the usage modes. How many days from now to look back and record")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_options(argv: Optional[List[str]] = None) -> RunOptions:
    """Parse command line arguments into RunOptions."""
    args = build_parser().parse_args(argv)
    return RunOptions(
        username=args.username,
        password=args.password,
        influx_uri=args.influx_uri,
        influx_database=args.influx_database,
        influx_username=args.influx_username,
        influx_password=args.influx_password,
        mode=args.mode,
        look_back_days=args.look_back_days,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run flick2influx and return the process exit status.

    The writer is always closed, flushing any buffered points, whether the
    routine succeeds, fails or never starts.
    """
    options = parse_options(argv)
    setup_logging()

    exit_code = 0
    writer = MetricsWriter(
        options.influx_uri,
        options.influx_database,
        username=options.influx_username,
        password=options.influx_password,
    )
    try:
        asyncio.run(Recorder(options, writer).run())
    except Flick2InfluxError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        exit_code = 1
    finally:
        writer.close()

    if writer.failed_points:
        print(f"ERROR: {writer.failed_points} points could not be written to influx", file=sys.stderr)
        exit_code = 1
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
