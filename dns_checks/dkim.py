"""
DKIM selector probe: one concurrent TXT lookup per selector at <selector>._domainkey.<domain>.
The first lookup to see v=DKIM1 claims the result under a lock, so at most one found line
is printed per domain no matter how many selectors resolve. All lookups run to completion.
"""
from concurrent.futures import ThreadPoolExecutor
import logging
import threading
from typing import Callable, Optional, Sequence

from core.constants import DKIM_LABEL, DKIM_TAG, RECORD_DKIM
from core.context import CheckOutcome, ScanContext

logger = logging.getLogger("sdd.dns")

NOT_FOUND_MESSAGE = "No DKIM record found with provided selectors."


def found_message(selector: str) -> str:
    return f"DKIM record found with selector '{selector}'."


def selector_name(selector: str, domain: str) -> str:
    return f"{selector}.{DKIM_LABEL}.{domain}"


class _FirstMatch:
    """Per-probe found flag. claim() sets it and reports under one lock acquisition."""

    def __init__(self, reporter, verbose: bool):
        self._lock = threading.Lock()
        self._reporter = reporter
        self._verbose = verbose
        self.selector: Optional[str] = None
        self.record: Optional[str] = None

    def claim(self, selector: str, record: str) -> bool:
        with self._lock:
            if self.selector is not None:
                return False
            self.selector = selector
            self.record = record
            self._reporter.found(RECORD_DKIM, found_message(selector), record if self._verbose else None)
            return True

    @property
    def found(self) -> bool:
        with self._lock:
            return self.selector is not None


def _probe_selector(domain: str, selector: str, verbose: bool, resolver, reporter, first: _FirstMatch) -> None:
    name = selector_name(selector, domain)
    txts, status, message = resolver.lookup(name)
    if status != "ok":
        logger.debug("DKIM lookup %s: %s (%s)", name, status, message)
        return
    for txt in txts:
        record = txt.strip()
        if verbose:
            reporter.detail(f"TXT Record for {name}: {record}")
        if record.lower().startswith(DKIM_TAG):
            if first.claim(selector, record):
                logger.debug("DKIM selector found: %s", selector)
            return


def check_dkim(
    domain: str,
    selectors: Sequence[str],
    verbose: bool,
    resolver,
    reporter,
    on_error: Optional[Callable[[str], None]] = None,
) -> CheckOutcome:
    """
    Probe every selector in parallel and report exactly one found / not-found line.
    A selector task that raises is logged and passed to on_error as "<selector>: <error>".
    """
    first = _FirstMatch(reporter, verbose)
    if selectors:
        with ThreadPoolExecutor(max_workers=len(selectors), thread_name_prefix="dkim") as executor:
            futures = [
                (sel, executor.submit(_probe_selector, domain, sel, verbose, resolver, reporter, first))
                for sel in selectors
            ]
        for sel, future in futures:
            exc = future.exception()
            if exc is not None:
                logger.warning("DKIM selector %s for %s failed: %s", sel, domain, exc)
                if on_error:
                    on_error(f"{sel}: {exc}")

    if not first.found:
        reporter.not_found(RECORD_DKIM, NOT_FOUND_MESSAGE)
        return CheckOutcome(domain, RECORD_DKIM, False)
    return CheckOutcome(domain, RECORD_DKIM, True, record=first.record, selector=first.selector)


def run(ctx: ScanContext, domain: str) -> CheckOutcome:
    return check_dkim(
        domain, ctx.selectors, ctx.verbose, ctx.resolver, ctx.reporter,
        on_error=lambda msg: ctx.add_step_error(domain, RECORD_DKIM, msg),
    )
