#!/usr/bin/env python3
"""
toolchain-doctor - command line entrypoint.

Usage:
    toolchain-doctor              # Run all probes and print the report
    toolchain-doctor --json       # Output the report as JSON
    toolchain-doctor --no-color   # Plain text even on a terminal
    toolchain-doctor --version    # Print version only

Exit Codes:
    0: No probe failed
    1: At least one probe failed, or the run aborted
    2: Invalid configuration (DOCTOR_* environment variables)
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .doctor import collect, run
from .errors import SettingsError
from .report import build_report, exit_code_for, summarize
from .settings import DoctorSettings

EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolchain-doctor",
        description="Check that this machine is ready for front-end development",
        epilog="Probe settings can be overridden with DOCTOR_* environment variables.",
    )

    parser.add_argument(
        "--version", "-v",
        action="store_true",
        help="Print version and exit",
    )

    parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output the report as JSON",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every probe and host call to stderr",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"toolchain-doctor {__version__}")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = DoctorSettings.from_env()
    except SettingsError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.json:
        verdicts, error = collect(settings)
        print(build_report(verdicts, error).to_json())
        return exit_code_for(summarize(verdicts), aborted=error is not None)

    return run(settings=settings, color=False if args.no_color else None)


if __name__ == "__main__":
    sys.exit(main())
