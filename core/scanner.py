"""
Scan orchestration: a fixed pool of worker threads takes domains from a single-slot handoff
and runs the mode's checks on each. The mode is validated before any worker starts.
A failing check is logged and recorded; the worker moves on to its next domain.
"""
import logging
import queue
import threading
import time
from typing import Callable

from core.constants import (
    INVALID_MODE_MESSAGE, MODE_ALL, MODE_DKIM, MODE_DMARC, MODE_SPF,
    RECORD_DKIM, RECORD_DMARC, RECORD_SPF, VALID_MODES,
)
from core.context import CheckOutcome, ScanContext, ScanJob

logger = logging.getLogger("sdd.scanner")

_STOP = None  # one per worker closes the handoff
_PUT_POLL_SECONDS = 0.5


class InvalidModeError(ValueError):
    """Mode is not one of spf, dkim, dmarc, all."""

    def __init__(self, mode: str):
        super().__init__(f"{INVALID_MODE_MESSAGE} (got {mode!r})")
        self.mode = mode


def _checker(record_type: str) -> Callable[[ScanContext, str], CheckOutcome]:
    return _check_module(record_type).run


def _check_module(record_type: str):
    from dns_checks import dkim, dmarc, spf

    return {RECORD_SPF: spf, RECORD_DKIM: dkim, RECORD_DMARC: dmarc}[record_type]


def checks_for_mode(mode: str) -> tuple[str, ...]:
    """Record types run for mode, in output order."""
    if mode == MODE_SPF:
        return (RECORD_SPF,)
    if mode == MODE_DKIM:
        return (RECORD_DKIM,)
    if mode == MODE_DMARC:
        return (RECORD_DMARC,)
    if mode == MODE_ALL:
        return (RECORD_SPF, RECORD_DKIM, RECORD_DMARC)
    raise InvalidModeError(mode)


def validate_mode(mode: str) -> None:
    if mode not in VALID_MODES:
        raise InvalidModeError(mode)


def scan_domain(ctx: ScanContext, job: ScanJob) -> list[CheckOutcome]:
    """Run every check for job.mode against job.domain, then print the separator."""
    outcomes: list[CheckOutcome] = []
    ctx.reporter.checking(job.domain)
    try:
        for record_type in checks_for_mode(job.mode):
            try:
                outcomes.append(_checker(record_type)(ctx, job.domain))
            except Exception as e:
                logger.exception("%s check failed for %s: %s", record_type, job.domain, e)
                ctx.add_step_error(job.domain, record_type, str(e))
                # a failed check still yields its one not-found line
                ctx.reporter.not_found(record_type, _check_module(record_type).NOT_FOUND_MESSAGE)
                outcomes.append(CheckOutcome(job.domain, record_type, False, error=str(e)))
    finally:
        ctx.reporter.separator()
    return outcomes


def _worker(ctx: ScanContext, handoff: queue.Queue, outcomes: list, outcomes_lock: threading.Lock) -> None:
    while True:
        job = handoff.get()
        try:
            if job is _STOP:
                return
            try:
                results = scan_domain(ctx, job)
            except Exception as e:
                logger.exception("Scan of %s failed: %s", job.domain, e)
                ctx.add_step_error(job.domain, "scan", str(e))
                continue
            with outcomes_lock:
                outcomes.extend(results)
        finally:
            handoff.task_done()


def _handoff(handoff: queue.Queue, item, threads: list[threading.Thread]) -> bool:
    """Put item for the workers; False once no worker is left alive to take it."""
    while True:
        try:
            handoff.put(item, timeout=_PUT_POLL_SECONDS)
            return True
        except queue.Full:
            if not any(t.is_alive() for t in threads):
                return False


def run_scan(ctx: ScanContext) -> list[CheckOutcome]:
    """
    Check every domain in ctx.domains with ctx.workers threads. Blocks until all workers exit.
    Raises InvalidModeError before dispatching anything if ctx.mode is unknown.
    """
    validate_mode(ctx.mode)
    if ctx.resolver is None or ctx.reporter is None:
        raise ValueError("ScanContext needs a resolver and a reporter")
    n_workers = max(1, int(ctx.workers))
    handoff: queue.Queue = queue.Queue(maxsize=1)
    outcomes: list[CheckOutcome] = []
    outcomes_lock = threading.Lock()
    start = time.perf_counter()

    threads = [
        threading.Thread(
            target=_worker,
            args=(ctx, handoff, outcomes, outcomes_lock),
            name=f"sdd-worker-{i}",
            daemon=True,
        )
        for i in range(n_workers)
    ]
    for t in threads:
        t.start()

    try:
        for domain in ctx.domains:
            if not _handoff(handoff, ScanJob(domain=domain, mode=ctx.mode), threads):
                logger.error("All scan workers exited; %s and later domains were not scanned", domain)
                ctx.add_step_error(domain, "scan", "no scan workers left")
                break
    finally:
        for _ in threads:
            if not _handoff(handoff, _STOP, threads):
                break
        for t in threads:
            t.join()

    logger.info(
        "Scan complete: %d domain(s), mode=%s, %d worker(s), %.1fs",
        len(ctx.domains), ctx.mode, n_workers, time.perf_counter() - start,
    )
    if ctx.step_errors:
        logger.warning("Step errors: %d", len(ctx.step_errors))
    return outcomes
