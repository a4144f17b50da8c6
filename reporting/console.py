"""
Console result lines: banner, per-domain header, tagged [SPF]/[DKIM]/[DMARC] outcomes, separator.
Writes are serialized so lines from concurrent workers never interleave mid-line.
"""
from dataclasses import dataclass
import sys
import threading
from typing import Optional, TextIO

from colorama import Fore, Style

from core.constants import SEPARATOR


@dataclass(frozen=True)
class Styles:
    """Named terminal styles. An uncolored set has every style empty."""

    banner: str = Fore.CYAN
    found: str = Fore.GREEN
    not_found: str = Fore.RED
    heading: str = Style.BRIGHT
    reset: str = Style.RESET_ALL

    @classmethod
    def plain(cls) -> "Styles":
        return cls(banner="", found="", not_found="", heading="", reset="")


BANNER_LINES = (
    "**********************************************",
    "* SDD SPF-DKIM-DMARC Checker                 *",
    "**********************************************",
)


class ConsoleReporter:
    """Thread-safe line writer for scan results."""

    def __init__(self, stream: Optional[TextIO] = None, color: bool = True):
        self.stream = stream
        self.styles = Styles() if color else Styles.plain()
        self._lock = threading.Lock()

    def _write(self, *lines: str) -> None:
        out = self.stream if self.stream is not None else sys.stdout
        with self._lock:
            for line in lines:
                print(line, file=out)
            out.flush()

    def banner(self) -> None:
        s = self.styles
        self._write(s.banner, *BANNER_LINES, s.reset)

    def checking(self, domain: str) -> None:
        s = self.styles
        self._write(f"{s.heading}Checking domain: {domain}{s.reset}")

    def found(self, tag: str, message: str, record: Optional[str] = None) -> None:
        """Found line; record is echoed on the next line when given (verbose)."""
        s = self.styles
        line = f"{s.found}[{tag}]{s.reset} {s.found}{message}{s.reset}"
        if record is not None:
            self._write(line, record)
        else:
            self._write(line)

    def not_found(self, tag: str, message: str) -> None:
        s = self.styles
        self._write(f"{s.not_found}[{tag}]{s.reset} {s.not_found}{message}{s.reset}")

    def detail(self, text: str) -> None:
        self._write(text)

    def error(self, text: str) -> None:
        s = self.styles
        self._write(f"{s.not_found}{text}{s.reset}")

    def separator(self) -> None:
        self._write(SEPARATOR)
