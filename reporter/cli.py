"""
Command-line entry point.

Usage:
    system-report [-h] [-v] [-o NAME] [--no-docker] [--no-audio] [--no-temp]

Exit codes: 0 on success (or --help), 1 on bad arguments or when the
report directory cannot be created / written.
"""

from __future__ import annotations

import argparse
import logging
import sys

from reporter.config import Config, ReportConfig
from reporter.logstore import LogStore
from reporter.writer import ReportWriter

logger = logging.getLogger("reporter.cli")

# ── Console colours (only used on a terminal) ───────────────────────
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
BLUE = "\033[0;34m"
CYAN = "\033[0;36m"
NC = "\033[0m"

DESCRIPTION = "Cross-Platform System Monitor"

EPILOG = f"""\
examples:
  %(prog)s                          Run with default settings
  %(prog)s -v -o my_report          Verbose output to logs/my_report.log
  %(prog)s --no-docker --no-audio   Skip Docker and audio info

log management:
  - Reports are saved to the report directory (REPORT_DIR, default ./logs)
  - Maximum of {Config.MAX_LOGS} report files are kept (MAX_LOGS)
  - Older reports are automatically cleaned up

supported systems:
  - Linux (all major distributions)
  - macOS
  - FreeBSD
  - Windows (native, WSL, Git Bash or Cygwin)
"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        # Unknown or malformed options: message, full usage, exit 1
        sys.stderr.write(f"Unknown option: {message}\n\n")
        self.print_help(sys.stderr)
        raise SystemExit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="system-report",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable verbose output")
    parser.add_argument("-o", "--output", metavar="NAME", default=None,
                        help="Specify output filename (saved in the report directory)")
    parser.add_argument("--no-docker", dest="include_docker", action="store_false",
                        help="Skip Docker information")
    parser.add_argument("--no-audio", dest="include_audio", action="store_false",
                        help="Skip audio system information")
    parser.add_argument("--no-temp", dest="include_temperature", action="store_false",
                        help="Skip temperature information")
    return parser


def parse_args(argv: list[str] | None = None) -> ReportConfig:
    args = build_parser().parse_args(argv)
    return ReportConfig(
        output_name=args.output,
        include_docker=args.include_docker,
        include_audio=args.include_audio,
        include_temperature=args.include_temperature,
        verbose=args.verbose,
    )


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, Config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _say(color: str, message: str, tty: bool) -> None:
    print(f"{color}{message}{NC}" if tty else message)


def main(argv: list[str] | None = None, writer: ReportWriter | None = None) -> int:
    config = parse_args(argv)
    setup_logging(config.verbose)

    writer = writer or ReportWriter(LogStore())
    if writer.store.max_logs < 1:
        logger.error("MAX_LOGS must be at least 1, got %d.", writer.store.max_logs)
        return 1

    tty = sys.stdout.isatty()

    def announce(platform, path, removed) -> None:
        for old in removed:
            _say(YELLOW, f"Removed: {old.name}", tty)
        _say(GREEN, DESCRIPTION, tty)
        _say(YELLOW, f"Detected OS: {platform}", tty)
        _say(BLUE, f"Report will be saved to: {path}", tty)

    try:
        result = writer.run(config, announce=announce)
    except OSError as exc:
        logger.error("Failed to write report: %s", exc)
        return 1

    if tty:
        print(result.body)

    _say(GREEN, f"Report saved to: {result.path}", tty)
    _say(CYAN, f"Total logs in directory: {result.occupancy}/{writer.store.max_logs}", tty)
    return 0


if __name__ == "__main__":
    sys.exit(main())
