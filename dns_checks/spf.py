"""
SPF presence: TXT records on the domain itself, any record starting with v=spf1.
Every record is scanned so duplicate SPF records surface in verbose mode.
"""
import logging
from core.constants import RECORD_SPF, SPF_TAG
from core.context import CheckOutcome, ScanContext

logger = logging.getLogger("sdd.dns")

FOUND_MESSAGE = "SPF record found."
NOT_FOUND_MESSAGE = "No SPF record found."


def is_spf_record(record: str) -> bool:
    return record.lower().startswith(SPF_TAG)


def check_spf(domain: str, verbose: bool, resolver, reporter) -> CheckOutcome:
    """Look up SPF for domain and report exactly one found / not-found line."""
    txts, status, message = resolver.lookup(domain)
    if status != "ok":
        logger.debug("SPF lookup %s: %s (%s)", domain, status, message)
        if verbose:
            reporter.detail(f"Error fetching TXT records for SPF: {message}")
        reporter.not_found(RECORD_SPF, NOT_FOUND_MESSAGE)
        return CheckOutcome(domain, RECORD_SPF, False, error=message)

    matches = []
    for txt in txts:
        record = txt.strip()
        if verbose:
            reporter.detail(f"TXT Record: {record}")
        if is_spf_record(record):
            matches.append(record)

    if not matches:
        reporter.not_found(RECORD_SPF, NOT_FOUND_MESSAGE)
        return CheckOutcome(domain, RECORD_SPF, False)

    reporter.found(RECORD_SPF, FOUND_MESSAGE, matches[0] if verbose else None)
    if verbose:
        for extra in matches[1:]:
            reporter.detail(extra)
        if len(matches) > 1:
            reporter.detail(f"Multiple SPF records published ({len(matches)}).")
    return CheckOutcome(domain, RECORD_SPF, True, record=matches[0])


def run(ctx: ScanContext, domain: str) -> CheckOutcome:
    return check_spf(domain, ctx.verbose, ctx.resolver, ctx.reporter)
