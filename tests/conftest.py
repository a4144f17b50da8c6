"""
Shared pytest fixtures for the SDD test suite.

A fixture resolver answers TXT lookups from a dict keyed by query name, so no
real DNS traffic happens. The reporter writes uncolored lines to a StringIO.
"""

from __future__ import annotations

import io
import threading
import time

import pytest

from reporting.console import ConsoleReporter


class FixtureResolver:
    """TXT lookups from a fixture table. Missing names answer NXDOMAIN.

    A value may be a list of record strings, or a (status, message) tuple to
    simulate a lookup failure. *delay* sleeps inside every lookup so that
    concurrent callers overlap.
    """

    def __init__(self, records: dict | None = None, delay: float = 0.0, fail_all: bool = False):
        self.records = dict(records or {})
        self.delay = delay
        self.fail_all = fail_all
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def lookup(self, name: str) -> tuple[list[str], str, str]:
        with self._lock:
            self.calls.append(name)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if self.fail_all:
                return ([], "error", f"lookup {name}: server misbehaving")
            value = self.records.get(name)
            if value is None:
                return ([], "nxdomain", f"{name} does not exist (NXDOMAIN)")
            if isinstance(value, tuple):
                status, message = value
                return ([], status, message)
            return (list(value), "ok", "")
        finally:
            with self._lock:
                self.active -= 1


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def reporter():
    """Uncolored reporter capturing output in memory."""
    return ConsoleReporter(stream=io.StringIO(), color=False)


@pytest.fixture
def make_resolver():
    """Factory for FixtureResolver instances."""
    return FixtureResolver
