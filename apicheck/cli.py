import argparse
import asyncio
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

from . import config
from .logger import check_logger, parse_level, setup_logger
from .models import CheckConfig, CheckOutcome, Severity
from .reporter import format_internal_error_line, format_usage_error_line
from .runner import run_check


class CheckArgumentParser(argparse.ArgumentParser):
    """
    Reports bad arguments as UNKNOWN, both on stdout and in the exit code,
    so a supervisor never reads a usage problem as CRITICAL.
    """

    def error(self, message):
        sys.stdout.write(format_usage_error_line(message))
        sys.stdout.flush()
        self.print_usage(sys.stderr)
        self.exit(int(Severity.UNKNOWN), f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = CheckArgumentParser(
        prog=config.APP_NAME,
        description="Monitoring check for XML status endpoints",
    )
    parser.add_argument("-U", "--url", default="", help="URL to check")
    parser.add_argument(
        "-t", "--timeout", type=float, default=config.DEFAULT_TIMEOUT,
        help="Timeout in seconds, fractions allowed",
    )
    parser.add_argument(
        "--request-timeout", type=float, default=None,
        help="Per-request HTTP timeout in seconds (defaults to --timeout)",
    )
    parser.add_argument(
        "-w", "--warning", type=float, default=config.DEFAULT_WARNING,
        help="Warning response time in seconds, fractions allowed",
    )
    parser.add_argument(
        "-c", "--critical", type=float, default=config.DEFAULT_CRITICAL,
        help="Critical response time in seconds, fractions allowed",
    )
    parser.add_argument("--verbose", action="store_true", help="Print long output")
    parser.add_argument("--user-agent", default=config.USER_AGENT, help="User-Agent header to send")
    parser.add_argument(
        "-l", "--log-level", default=None,
        help=f"Log level (options: debug, info, warn, error, fatal, panic). Default: {config.LOG_LEVEL}",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Run in debug mode")
    parser.add_argument("--log-file", default=config.LOG_FILE, help="Also write logs to this rotating file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {config.VERSION}")
    return parser


def configure_logging(args: argparse.Namespace):
    """--debug only applies when no log level was given explicitly."""
    if args.log_level is None and args.debug:
        level_name = "debug"
    else:
        level_name = args.log_level or config.LOG_LEVEL
    setup_logger(parse_level(level_name), log_file=args.log_file)


def _emit(outcome: CheckOutcome):
    sys.stdout.write(outcome.output)
    sys.stdout.flush()


async def _run_and_emit(check_config: CheckConfig) -> CheckOutcome:
    outcome = await run_check(check_config)
    _emit(outcome)
    if outcome.abandoned:
        # Skip event loop teardown; the in-flight fetch dies with the process.
        os._exit(outcome.exit_code)
    return outcome


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args)
    except (ValueError, OSError) as e:
        parser.error(str(e))

    try:
        check_config = CheckConfig(
            url=args.url,
            timeout=args.timeout,
            request_timeout=args.request_timeout,
            warning=args.warning,
            critical=args.critical,
            verbose=args.verbose,
            user_agent=args.user_agent,
        )
    except ValidationError as e:
        parser.error(str(e))

    check_logger.debug({
        "message": "Entrypoint params",
        "url": check_config.url,
        "verbose": check_config.verbose,
        "warning": check_config.warning,
        "critical": check_config.critical,
        "timeout": check_config.timeout,
    })

    try:
        outcome = asyncio.run(_run_and_emit(check_config))
    except Exception as e:
        check_logger.exception("Check run failed unexpectedly")
        outcome = CheckOutcome(severity=Severity.UNKNOWN, output=format_internal_error_line(e))
        _emit(outcome)

    sys.exit(outcome.exit_code)
