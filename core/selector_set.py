"""
DKIM selector set: built-in defaults, optionally extended from a file (one selector per line).
"""
import logging
from typing import Callable, Optional

from core.constants import DEFAULT_SELECTORS

logger = logging.getLogger("sdd.selectors")


def load_selectors(path: Optional[str] = None, on_error: Optional[Callable[[str], None]] = None) -> tuple[str, ...]:
    """
    Return defaults followed by the non-blank, stripped lines of path.
    An unreadable file is reported through on_error and the defaults are used.
    """
    selectors = list(DEFAULT_SELECTORS)
    if not path:
        return tuple(selectors)
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            for line in f:
                selector = line.strip()
                if selector:
                    selectors.append(selector)
    except OSError as e:
        logger.debug("Could not read selector file %s: %s", path, e)
        if on_error:
            on_error(f"Error opening selector file: {e}")
        return tuple(DEFAULT_SELECTORS)
    logger.debug("Loaded %d selectors (%d from %s)", len(selectors), len(selectors) - len(DEFAULT_SELECTORS), path)
    return tuple(selectors)
