"""
Unit tests for the sdd.py command line front-end.

The resolver is replaced with a fixture table and logging setup is patched
out so the test runner's handlers are left alone.
"""

from __future__ import annotations

import io
from unittest.mock import patch

import pytest

import sdd
from core.constants import INVALID_MODE_MESSAGE, SEPARATOR, USAGE_HINT


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(sdd, "configure_logging", lambda verbose, log_file: None)
    for name in ("SDD_VERBOSE", "SDD_WORKERS", "SDD_NO_COLOR", "SDD_SELECTOR_FILE", "SDD_NAMESERVERS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def run_cli(make_resolver):
    """Run sdd.run() against a fixture resolver; returns (code, lines, resolver, factory)."""

    def _run(argv, records=None, stdin=None, fail_all=False):
        stdout = io.StringIO()
        resolver = make_resolver(records, fail_all=fail_all)
        with patch("core.utils.TxtResolver", return_value=resolver) as factory:
            code = sdd.run(argv + ["--no-color"], stdin=stdin, stdout=stdout)
        return code, stdout.getvalue().splitlines(), resolver, factory

    return _run


def test_single_endpoint_spf(run_cli):
    code, lines, resolver, _ = run_cli(
        ["-u", "https://example.com/login", "-m", "spf", "--no-banner"],
        {"example.com": ["v=spf1 include:_spf.example.com ~all"]},
    )
    assert code == sdd.EXIT_SUCCESS
    assert lines == ["Checking domain: example.com", "[SPF] SPF record found.", SEPARATOR]
    assert resolver.calls == ["example.com"]


def test_banner_printed_by_default(run_cli):
    _, lines, _, _ = run_cli(["-u", "example.com", "-m", "dmarc"])
    assert any("SDD SPF-DKIM-DMARC Checker" in line for line in lines)
    assert lines[-1] == SEPARATOR


def test_invalid_mode_rejected_before_scanning(run_cli):
    code, lines, resolver, factory = run_cli(["-u", "example.com", "-m", "SPF"])
    assert code == sdd.EXIT_VALIDATION
    assert lines == [INVALID_MODE_MESSAGE]
    factory.assert_not_called()
    assert resolver.calls == []


def test_list_file_all_mode_lookup_failures(run_cli, tmp_path):
    path = tmp_path / "domains.txt"
    path.write_text("nodns.test\n", encoding="utf-8")
    code, lines, _, _ = run_cli(["-l", str(path), "--no-banner"], fail_all=True)

    assert code == sdd.EXIT_SUCCESS
    assert lines.count("[SPF] No SPF record found.") == 1
    assert lines.count("[DKIM] No DKIM record found with provided selectors.") == 1
    assert lines.count("[DMARC] No DMARC record found.") == 1


def test_missing_list_file_aborts(run_cli, tmp_path):
    code, lines, resolver, _ = run_cli(["-l", str(tmp_path / "missing.txt"), "--no-banner"])
    assert code == sdd.EXIT_VALIDATION
    assert lines[0].startswith("Error opening file: ")
    assert resolver.calls == []


def test_piped_stdin_domains(run_cli):
    stdin = io.StringIO("a.example\nhttps://b.example/\n")
    code, lines, _, _ = run_cli(["-m", "dmarc", "--no-banner"], {"_dmarc.b.example": ["v=DMARC1; p=none"]}, stdin=stdin)

    assert code == sdd.EXIT_SUCCESS
    assert sorted(line for line in lines if line.startswith("Checking domain: ")) == [
        "Checking domain: a.example",
        "Checking domain: b.example",
    ]
    assert lines.count("[DMARC] DMARC record found.") == 1
    assert lines.count("[DMARC] No DMARC record found.") == 1


def test_no_input_prints_usage_hint(run_cli):
    class _Tty(io.StringIO):
        def isatty(self):
            return True

    code, lines, _, _ = run_cli(["--no-banner"], stdin=_Tty(""))
    assert code == sdd.EXIT_VALIDATION
    assert lines == [USAGE_HINT]


def test_selector_file_extends_selector_set(run_cli, tmp_path):
    path = tmp_path / "selectors.txt"
    path.write_text("custom2048\n", encoding="utf-8")
    code, lines, resolver, _ = run_cli(
        ["-u", "example.com", "-m", "dkim", "-s", str(path), "--no-banner"],
        {"custom2048._domainkey.example.com": ["v=DKIM1; p=abc"]},
    )
    assert code == sdd.EXIT_SUCCESS
    assert "[DKIM] DKIM record found with selector 'custom2048'." in lines
    assert len(resolver.calls) == 11


def test_unreadable_selector_file_falls_back(run_cli, tmp_path):
    code, lines, resolver, _ = run_cli(
        ["-u", "example.com", "-m", "dkim", "-s", str(tmp_path / "nope.txt"), "--no-banner"],
    )
    assert code == sdd.EXIT_SUCCESS
    assert lines[0].startswith("Error opening selector file: ")
    assert len(resolver.calls) == 10


def test_resolver_built_from_cli_options(run_cli):
    _, _, _, factory = run_cli(["-u", "example.com", "-m", "spf", "--dns-timeout", "2", "--nameserver", "9.9.9.9"])
    kwargs = factory.call_args.kwargs
    assert kwargs["timeout"] == 2.0
    assert kwargs["nameservers"] == ["9.9.9.9"]


def test_step_errors_exit_code(run_cli):
    with patch("dns_checks.dmarc.check_dmarc", side_effect=RuntimeError("boom")):
        code, lines, _, _ = run_cli(["-u", "example.com", "-m", "dmarc", "--no-banner"])
    assert code == sdd.EXIT_SCAN_FAILURE
    assert lines == ["Checking domain: example.com", "[DMARC] No DMARC record found.", SEPARATOR]
