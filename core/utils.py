"""
Common utilities: TXT resolution with a status, so callers can fold failures into "not found".
Status values: ok | empty | nxdomain | timeout | error.
"""
import logging
from typing import Any, Optional

import dns.exception
import dns.resolver

from core.constants import DNS_LIFETIME, DNS_RETRIES, DNS_TIMEOUT

logger = logging.getLogger("sdd.utils")


def _extract_txt(answers) -> list[str]:
    return [b"".join(r.strings).decode("utf-8", errors="replace") for r in answers]


class TxtResolver:
    """
    Looks up TXT records for a name. lookup() returns (records, status, message).
    System nameservers are read once; a new dns.resolver.Resolver is built per query from them
    so one instance can be shared by all threads.
    """

    def __init__(
        self,
        timeout: float = DNS_TIMEOUT,
        lifetime: float = DNS_LIFETIME,
        retries: int = DNS_RETRIES,
        nameservers: Optional[list[str]] = None,
    ):
        self.timeout = float(timeout)
        self.lifetime = max(float(lifetime), self.timeout)
        self.retries = max(0, int(retries))
        self.nameservers = list(nameservers or [])
        self.config_error: Optional[str] = None
        if not self.nameservers:
            try:
                self.nameservers = list(dns.resolver.Resolver(configure=True).nameservers)
            except dns.exception.DNSException as e:
                self.config_error = f"resolver configuration: {e}"
                logger.warning("Could not read system resolver configuration: %s", e)
            if not self.nameservers and self.config_error is None:
                self.config_error = "resolver configuration: no nameservers"

    def _make_resolver(self) -> dns.resolver.Resolver:
        resolver = dns.resolver.Resolver(configure=False)
        resolver.nameservers = self.nameservers
        resolver.timeout = self.timeout
        resolver.lifetime = self.lifetime
        return resolver

    def lookup(self, name: str) -> tuple[list[str], str, str]:
        """Resolve TXT for name. Only timeouts and nameserver failures are retried."""
        if self.config_error:
            return ([], "error", self.config_error)
        try:
            resolver = self._make_resolver()
        except dns.exception.DNSException as e:
            logger.debug("Resolver setup for %s failed: %s", name, e)
            return ([], "error", f"resolver configuration: {e}")
        return _dns_resolve(resolver, name, "TXT", _extract_txt, self.retries)


def _dns_resolve(
    resolver: dns.resolver.Resolver,
    name: str,
    rtype: str,
    extract: Any,
    retries: int,
) -> tuple[list[Any], str, str]:
    last_exc = None
    for attempt in range(retries + 1):
        try:
            answers = resolver.resolve(name, rtype)
            data = extract(answers)
            if data:
                return (data, "ok", "")
            return ([], "empty", f"no {rtype} records for {name}")
        except dns.resolver.NXDOMAIN:
            return ([], "nxdomain", f"{name} does not exist (NXDOMAIN)")
        except dns.resolver.NoAnswer:
            return ([], "empty", f"no {rtype} records for {name}")
        except dns.resolver.NoNameservers:
            last_exc = f"no nameservers answered for {name}"
        except dns.exception.Timeout:
            last_exc = f"timeout resolving {name}"
        except dns.exception.DNSException as e:
            logger.debug("%s %s failed: %s", rtype, name, e)
            return ([], "error", f"lookup {name}: {e}")
        logger.debug("%s %s attempt %d failed: %s", rtype, name, attempt + 1, last_exc)
    status = "timeout" if last_exc and last_exc.startswith("timeout") else "error"
    return ([], status, last_exc or "unknown error")
