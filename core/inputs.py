"""
Domain input: sanitize endpoints and collect them from a single value, a list file or piped stdin.
"""
import logging
import os
import stat
import sys
from typing import Iterable, Optional, TextIO

logger = logging.getLogger("sdd.inputs")


class InputError(Exception):
    """Domain input could not be read; the run must abort."""


class NoInputError(InputError):
    """No endpoint, list file or piped stdin was given."""


def sanitize_endpoint(endpoint: str) -> str:
    """Strip scheme, trailing slash and any path: 'https://example.com/a/b' -> 'example.com'."""
    endpoint = endpoint.strip()
    if endpoint.startswith("http://"):
        endpoint = endpoint[len("http://"):]
    elif endpoint.startswith("https://"):
        endpoint = endpoint[len("https://"):]
    if endpoint.endswith("/"):
        endpoint = endpoint[:-1]
    if "/" in endpoint:
        endpoint = endpoint.split("/", 1)[0]
    return endpoint


def sanitize_lines(lines: Iterable[str]) -> list[str]:
    """Sanitize each line; blank lines are skipped."""
    domains = []
    for line in lines:
        domain = sanitize_endpoint(line)
        if domain:
            domains.append(domain)
    return domains


def stdin_is_piped(stream: TextIO) -> bool:
    """True when stream is a pipe or a redirected file rather than a terminal."""
    try:
        mode = os.fstat(stream.fileno()).st_mode
    except (OSError, ValueError, AttributeError):
        # No real descriptor (e.g. StringIO): treat as piped data
        return not stream.isatty()
    return not stat.S_ISCHR(mode)


def collect_domains(
    endpoint: Optional[str] = None,
    list_file: Optional[str] = None,
    stdin: Optional[TextIO] = None,
) -> list[str]:
    """
    Collect domains in priority order: endpoint, then list_file, then piped stdin.
    Raises InputError when the list file or stdin cannot be read, NoInputError when nothing was given.
    """
    if endpoint:
        return [sanitize_endpoint(endpoint)]
    if list_file:
        try:
            with open(list_file, encoding="utf-8", errors="replace") as f:
                domains = sanitize_lines(f)
        except OSError as e:
            raise InputError(f"Error opening file: {e}") from e
        logger.debug("Read %d domains from %s", len(domains), list_file)
        return domains
    stream = stdin if stdin is not None else sys.stdin
    if stream is None:
        raise NoInputError()
    try:
        piped = stdin_is_piped(stream)
    except OSError as e:
        raise InputError(f"Error reading stdin: {e}") from e
    if not piped:
        raise NoInputError()
    try:
        return sanitize_lines(stream)
    except OSError as e:
        raise InputError(f"Error reading stdin: {e}") from e
