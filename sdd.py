#!/usr/bin/env python3
"""
SDD — SPF / DKIM / DMARC batch checker.
Checks many domains concurrently for SPF, DKIM (over a selector list) and DMARC TXT records.

Usage:
  sdd.py -u https://example.com
  sdd.py -l domains.txt -m dkim -s selectors.txt -v
  cat domains.txt | sdd.py -m all
"""
import argparse
import logging
import os
import sys
from typing import Optional, TextIO

# Ensure project root is on path when run as script
_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from core.config import load_env_config, load_file_config, merge_config
from core.constants import INVALID_MODE_MESSAGE, MODE_ALL, USAGE_HINT
from core.context import ScanContext
from core.inputs import InputError, NoInputError, collect_domains
from core.requirements_check import check_requirements
from core.scanner import InvalidModeError, run_scan, validate_mode
from core.selector_set import load_selectors

__version__ = "1.0.0"

# Exit codes: 0 = success, 1 = usage/input/deps error, 2 = scan finished with step errors
EXIT_SUCCESS = 0
EXIT_VALIDATION = 1
EXIT_SCAN_FAILURE = 2

logger = logging.getLogger("sdd")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sdd",
        description="SPF / DKIM / DMARC checker. Domains come from -u, -l or piped stdin.",
    )
    parser.add_argument("-u", "--url", dest="endpoint", metavar="ENDPOINT", help="Single endpoint (scheme and path are stripped)")
    parser.add_argument("-l", "--list", dest="list_file", metavar="FILE", help="File with one endpoint per line")
    parser.add_argument("-m", "--mode", default=MODE_ALL, help="Mode: spf, dkim, dmarc, all (default: all)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print raw TXT records and lookup errors")
    parser.add_argument("-s", "--selectors", dest="selector_file", metavar="FILE", help="File with extra DKIM selectors, one per line")
    parser.add_argument("-w", "--workers", type=int, metavar="N", help="Concurrent domain workers (default: 10)")
    parser.add_argument("--dns-timeout", type=float, metavar="SEC", help="DNS query timeout in seconds")
    parser.add_argument("--nameserver", action="append", dest="nameservers", metavar="IP", help="Nameserver to query (repeatable; default: system resolver)")
    parser.add_argument("--config", metavar="FILE", help="Path to JSON config file (overridden by CLI)")
    parser.add_argument("--log-file", metavar="FILE", help="Append logs to file")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--no-banner", action="store_true", help="Do not print the banner")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def configure_logging(verbose: bool, log_file: Optional[str]) -> None:
    """Logs go to stderr (and optionally a file); result lines go to stdout via the reporter."""
    log_format = "%(name)s %(levelname)s %(message)s" if verbose else "%(message)s"
    log_level = logging.DEBUG if verbose else logging.WARNING
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    file_error = None
    if log_file:
        try:
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(logging.Formatter(log_format))
            handlers.append(fh)
        except OSError as e:
            file_error = e
    logging.basicConfig(level=log_level, format=log_format, handlers=handlers, force=True)
    logging.getLogger("dns").setLevel(logging.WARNING)
    if file_error:
        logger.warning("Could not open log file %s: %s", log_file, file_error)


def run(argv: Optional[list[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    """Parse arguments, collect domains and selectors, run the scan. Returns the exit code."""
    args = parse_args(argv)
    check_requirements()

    from colorama import just_fix_windows_console
    from core.utils import TxtResolver
    from reporting.console import ConsoleReporter

    env_cfg = load_env_config()
    file_cfg = load_file_config(args.config or "")
    cli_cfg = {
        "verbose": True if args.verbose else None,
        "workers": args.workers,
        "dns_timeout": args.dns_timeout,
        "nameservers": args.nameservers or None,
        "selector_file": (args.selector_file or "").strip() or None,
        "log_file": (args.log_file or "").strip() or None,
        "color": False if args.no_color else None,
    }
    merged = merge_config(env_cfg, file_cfg, cli_cfg)
    configure_logging(merged["verbose"], merged["log_file"])

    if merged["color"] and stdout is None:
        just_fix_windows_console()
    reporter = ConsoleReporter(stream=stdout, color=merged["color"])

    try:
        validate_mode(args.mode)
    except InvalidModeError:
        reporter.error(INVALID_MODE_MESSAGE)
        return EXIT_VALIDATION

    if not args.no_banner:
        reporter.banner()

    try:
        domains = collect_domains(args.endpoint, args.list_file, stdin)
    except NoInputError:
        reporter.detail(USAGE_HINT)
        return EXIT_VALIDATION
    except InputError as e:
        reporter.error(str(e))
        return EXIT_VALIDATION

    selectors = load_selectors(merged["selector_file"], on_error=reporter.error)
    resolver = TxtResolver(
        timeout=merged["dns_timeout"],
        lifetime=merged["dns_lifetime"],
        retries=merged["dns_retries"],
        nameservers=merged["nameservers"],
    )
    ctx = ScanContext(
        domains=domains,
        mode=args.mode,
        verbose=merged["verbose"],
        workers=merged["workers"],
        selectors=selectors,
        resolver=resolver,
        reporter=reporter,
    )
    logger.debug("Scanning %d domain(s) with %d selector(s), mode=%s", len(domains), len(selectors), ctx.mode)
    run_scan(ctx)
    if ctx.step_errors:
        for err in ctx.step_errors:
            logger.warning("  %s %s: %s", err.get("domain"), err.get("step"), err.get("error", ""))
        return EXIT_SCAN_FAILURE
    return EXIT_SUCCESS


def main() -> None:
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
