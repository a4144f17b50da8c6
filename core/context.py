"""
Run options and scan state.
ScanContext holds domains, mode and collaborators for one run; ScanJob and CheckOutcome are the
per-domain unit of work and the per-record result.
"""
from dataclasses import dataclass, field
import threading
from typing import Any, Optional, TYPE_CHECKING

from core.constants import DEFAULT_SELECTORS, DEFAULT_WORKERS, MODE_ALL

if TYPE_CHECKING:
    from core.utils import TxtResolver
    from reporting.console import ConsoleReporter


@dataclass(frozen=True)
class CheckOutcome:
    """Found / not found for one (domain, record type). DKIM also names the winning selector."""

    domain: str
    record_type: str
    found: bool
    record: Optional[str] = None
    selector: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ScanJob:
    domain: str
    mode: str


@dataclass
class ScanContext:
    """Holds the domain list, scan options and the resolver/reporter collaborators."""

    domains: list[str] = field(default_factory=list)
    mode: str = MODE_ALL
    verbose: bool = False
    workers: int = DEFAULT_WORKERS
    selectors: tuple[str, ...] = DEFAULT_SELECTORS

    resolver: Optional["TxtResolver"] = None
    reporter: Optional["ConsoleReporter"] = None

    # Step errors (domain, step, error) when a checker raises; scan continues
    step_errors: list[dict[str, str]] = field(default_factory=list)
    _errors_lock: Any = field(default_factory=threading.Lock, repr=False, compare=False)

    def add_step_error(self, domain: str, step: str, error: str) -> None:
        """Record a checker failure; called from worker threads."""
        with self._errors_lock:
            self.step_errors.append({"domain": domain, "step": step, "error": error})
