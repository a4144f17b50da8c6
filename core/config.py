"""
Configuration: environment variables and optional config file (JSON).
CLI arguments override config file override env vars.
"""
import json
import logging
import os
from typing import Any

from core.constants import DEFAULT_WORKERS, DNS_LIFETIME, DNS_RETRIES, DNS_TIMEOUT

logger = logging.getLogger("sdd.config")

DEFAULTS: dict[str, Any] = {
    "verbose": False,
    "workers": DEFAULT_WORKERS,
    "dns_timeout": DNS_TIMEOUT,
    "dns_lifetime": DNS_LIFETIME,
    "dns_retries": DNS_RETRIES,
    "nameservers": None,
    "selector_file": None,
    "log_file": None,
    "color": True,
}


def _env_bool(name: str, default: bool | None = None) -> bool | None:
    v = os.environ.get(name, "").strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    return default


def _env_float(name: str, default: float | None = None) -> float | None:
    v = os.environ.get(name, "").strip()
    if not v:
        return default
    try:
        return float(v)
    except ValueError:
        logger.warning("Environment variable %s has invalid value %r; ignoring.", name, v)
        return default


def _env_int(name: str, default: int | None = None) -> int | None:
    v = os.environ.get(name, "").strip()
    if not v:
        return default
    try:
        return int(v)
    except ValueError:
        logger.warning("Environment variable %s has invalid value %r; ignoring.", name, v)
        return default


def _split_list(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        items = [p.strip() for p in value.split(",")]
    else:
        items = [str(p).strip() for p in value]
    items = [p for p in items if p]
    return items or None


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables (SDD_*). Unset variables map to None."""
    no_color = _env_bool("SDD_NO_COLOR")
    return {
        "verbose": _env_bool("SDD_VERBOSE"),
        "workers": _env_int("SDD_WORKERS"),
        "dns_timeout": _env_float("SDD_DNS_TIMEOUT"),
        "dns_lifetime": _env_float("SDD_DNS_LIFETIME"),
        "dns_retries": _env_int("SDD_DNS_RETRIES"),
        "nameservers": _split_list(os.environ.get("SDD_NAMESERVERS", "")),
        "selector_file": os.environ.get("SDD_SELECTOR_FILE", "").strip() or None,
        "log_file": os.environ.get("SDD_LOG_FILE", "").strip() or None,
        "color": None if no_color is None else not no_color,
    }


def load_file_config(path: str) -> dict[str, Any]:
    """Load configuration from a JSON file. Returns empty dict on error."""
    if not path or not os.path.isfile(path):
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        return {}
    mapping = {
        "verbose": "verbose",
        "workers": "workers",
        "threads": "workers",
        "dns_timeout": "dns_timeout",
        "timeout": "dns_timeout",
        "dns_lifetime": "dns_lifetime",
        "dns_retries": "dns_retries",
        "nameservers": "nameservers",
        "selector_file": "selector_file",
        "selectors": "selector_file",
        "log_file": "log_file",
        "color": "color",
    }
    out: dict[str, Any] = {}
    for k, v in data.items():
        key = mapping.get(k)
        if key is None:
            logger.debug("Config key %s is not recognized; skipping.", k)
            continue
        if key in ("verbose", "color"):
            out[key] = bool(v)
        elif key in ("selector_file", "log_file"):
            out[key] = str(v).strip() if v else None
        elif key == "nameservers":
            out[key] = _split_list(v)
        elif key in ("workers", "dns_retries"):
            try:
                out[key] = int(v) if v is not None else None
            except (TypeError, ValueError):
                logger.warning("Config key %s has invalid value %r; skipping.", key, v)
        elif key in ("dns_timeout", "dns_lifetime"):
            try:
                out[key] = float(v) if v is not None else None
            except (TypeError, ValueError):
                logger.warning("Config key %s has invalid value %r; skipping.", key, v)
    return out


def merge_config(env: dict[str, Any], file_cfg: dict[str, Any], cli: dict[str, Any]) -> dict[str, Any]:
    """Merge defaults, then env, then file, then CLI. CLI overrides all; None never overrides."""
    out = dict(DEFAULTS)
    for layer in (env, file_cfg, cli):
        for k, v in layer.items():
            if v is not None:
                out[k] = v
    if out.get("workers") is not None and int(out["workers"]) < 1:
        logger.warning("workers must be >= 1 (got %s); using %d.", out["workers"], DEFAULT_WORKERS)
        out["workers"] = DEFAULT_WORKERS
    return out
