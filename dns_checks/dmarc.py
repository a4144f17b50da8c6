"""
DMARC presence: TXT record at _dmarc.<domain> starting with v=DMARC1 (case-insensitive).
"""
import logging
from core.constants import DMARC_LABEL, DMARC_TAG, RECORD_DMARC
from core.context import CheckOutcome, ScanContext

logger = logging.getLogger("sdd.dns")

FOUND_MESSAGE = "DMARC record found."
NOT_FOUND_MESSAGE = "No DMARC record found."


def dmarc_name(domain: str) -> str:
    return f"{DMARC_LABEL}.{domain}"


def check_dmarc(domain: str, verbose: bool, resolver, reporter) -> CheckOutcome:
    """Look up _dmarc.<domain>; the first matching record wins."""
    name = dmarc_name(domain)
    txts, status, message = resolver.lookup(name)
    if status != "ok":
        logger.debug("DMARC lookup %s: %s (%s)", name, status, message)
        if verbose:
            reporter.detail(f"Error fetching TXT records for DMARC: {message}")
        reporter.not_found(RECORD_DMARC, NOT_FOUND_MESSAGE)
        return CheckOutcome(domain, RECORD_DMARC, False, error=message)

    for txt in txts:
        record = txt.strip()
        if verbose:
            reporter.detail(f"TXT Record: {record}")
        if record.lower().startswith(DMARC_TAG):
            reporter.found(RECORD_DMARC, FOUND_MESSAGE, record if verbose else None)
            return CheckOutcome(domain, RECORD_DMARC, True, record=record)

    reporter.not_found(RECORD_DMARC, NOT_FOUND_MESSAGE)
    return CheckOutcome(domain, RECORD_DMARC, False)


def run(ctx: ScanContext, domain: str) -> CheckOutcome:
    return check_dmarc(domain, ctx.verbose, ctx.resolver, ctx.reporter)
