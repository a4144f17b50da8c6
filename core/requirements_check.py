"""
Pre-flight check: the resolver needs dnspython and the console reporter needs colorama.
Missing packages are listed on stderr and the process exits with 1 before any scanning.
"""
import importlib
import sys

# (purpose, import name, pip name)
REQUIRED = (
    ("DNS resolution", "dns.resolver", "dnspython"),
    ("Terminal colors", "colorama", "colorama"),
)


def missing_requirements() -> list[tuple[str, str]]:
    """Return (purpose, install hint) for every required package that fails to import."""
    missing = []
    for purpose, module, dist in REQUIRED:
        try:
            importlib.import_module(module)
        except ImportError:
            missing.append((purpose, f"{dist} (pip install {dist})"))
    return missing


def check_requirements() -> None:
    missing = missing_requirements()
    if not missing:
        return
    print("SDD: missing required package(s). Install them and run again.\n", file=sys.stderr)
    for purpose, hint in missing:
        print(f"  [X] {purpose}: {hint}", file=sys.stderr)
    sys.exit(1)
