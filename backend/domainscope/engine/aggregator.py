"""
Domain Aggregator for DomainScope.

Coordinates one report request:

1. Reject a missing domain before any source is contacted.
2. Launch the registration, certificate and website adapters together
   with the DNS adapter, all concurrently.
3. As soon as DNS finishes, fan out one geolocation lookup per distinct
   resolved IP (A then AAAA, first-seen order).
4. Join everything and assemble the :class:`DomainReport`.

Every adapter call is wrapped with its own timeout and an exception guard
that downgrades any failure to :class:`Absent`, so a slow or broken source
only blanks its own part of the report.  Cancelling :meth:`aggregate`
cancels every in-flight adapter call.
"""

from __future__ import annotations

import asyncio
import ipaddress
import time
from typing import Any, Mapping, Optional

import domainscope.modules  # noqa: F401 -- registers the adapters
from domainscope.config import get_settings
from domainscope.core.logging import get_logger, source_logger
from domainscope.core.validation import require_domain
from domainscope.engine.normalizer import normalize_network
from domainscope.models.report import (
    Absent,
    CertificateInfo,
    DnsRecordSet,
    DomainReport,
    NetworkInfo,
    RegistrationRecord,
    SiteProfile,
)
from domainscope.modules.base import BaseSourceAdapter
from domainscope.modules.registry import AdapterRegistry

logger = get_logger(__name__)

# Extra seconds granted on top of an adapter's own timeout before the
# aggregator gives up on it.
_TIMEOUT_GRACE: float = 1.0


class DomainAggregator:
    """Builds a :class:`DomainReport` from all source adapters.

    The aggregator holds no per-request state, so one instance can serve
    any number of concurrent requests.

    Usage::

        aggregator = DomainAggregator()
        report = await aggregator.aggregate("example.com")

    Args:
        adapters: Replacements for registered adapters, keyed by adapter
            name (``registration``, ``dns``, ``geolocation``,
            ``certificate``, ``site``).
        timeouts: Per-adapter timeouts in seconds overriding the settings.
    """

    def __init__(
        self,
        adapters: Optional[Mapping[str, BaseSourceAdapter]] = None,
        timeouts: Optional[Mapping[str, float]] = None,
    ) -> None:
        self._adapters: dict[str, BaseSourceAdapter] = AdapterRegistry.get_all()
        if adapters:
            self._adapters.update(adapters)

        settings = get_settings()
        self._timeouts: dict[str, float] = {
            "registration": settings.REGISTRATION_TIMEOUT,
            "dns": settings.DNS_TIMEOUT,
            "geolocation": settings.GEOLOCATION_TIMEOUT,
            "certificate": settings.CERTIFICATE_TIMEOUT,
            "site": settings.SITE_TIMEOUT,
        }
        if timeouts:
            self._timeouts.update(timeouts)

    # -- Public entry point ---------------------------------------------------

    async def aggregate(self, domain: str) -> DomainReport:
        """Collect every source for *domain* into one report.

        Args:
            domain: The domain to investigate, treated as opaque.

        Returns:
            A structurally complete report; ``alerts`` is left empty for the
            correlation engine.

        Raises:
            InvalidDomainQuery: If *domain* is missing or blank.
        """
        domain = require_domain(domain)
        start: float = time.monotonic()

        logger.info(
            "Aggregation started",
            extra={"action": "aggregate_start", "target": domain},
        )

        registration, (dns_records, networks), certificate, site = await asyncio.gather(
            self._run("registration", domain),
            self._resolve_and_locate(domain),
            self._run("certificate", domain),
            self._run("site", domain),
        )

        report = DomainReport(
            domain=domain,
            registration=(
                registration
                if isinstance(registration, RegistrationRecord)
                else RegistrationRecord()
            ),
            dns=dns_records,
            ip_networks=networks,
            certificate=certificate if isinstance(certificate, CertificateInfo) else None,
            site=site if isinstance(site, SiteProfile) else None,
        )

        logger.info(
            "Aggregation finished in %.2fs (%d IPs)",
            time.monotonic() - start,
            len(networks),
            extra={"action": "aggregate_done", "target": domain},
        )
        return report

    # -- Scheduling helpers ---------------------------------------------------

    async def _resolve_and_locate(
        self, domain: str
    ) -> tuple[DnsRecordSet, list[NetworkInfo]]:
        """Run DNS, then geolocate every distinct resolved address."""
        dns_result = await self._run("dns", domain)
        dns_records = dns_result if isinstance(dns_result, DnsRecordSet) else DnsRecordSet()

        addresses = [ip for ip in dns_records.addresses() if _is_ip(ip)]
        if not addresses:
            return dns_records, []

        results = await asyncio.gather(
            *(self._run("geolocation", ip) for ip in addresses)
        )
        networks = [
            result if isinstance(result, NetworkInfo) else normalize_network(ip, None)
            for ip, result in zip(addresses, results)
        ]
        return dns_records, networks

    async def _run(self, name: str, target: str) -> Any:
        """Call one adapter under its timeout; failures become :class:`Absent`."""
        adapter = self._adapters[name]
        timeout = self._timeouts[name]
        log = source_logger(logger, name)
        start: float = time.monotonic()

        try:
            result = await asyncio.wait_for(
                adapter.fetch(target, timeout),
                timeout=timeout + _TIMEOUT_GRACE,
            )
        except asyncio.TimeoutError:
            result = Absent(source=name, reason="timeout")
        except Exception as exc:  # noqa: BLE001
            log.exception(
                "Adapter raised %s",
                exc.__class__.__name__,
                extra={"action": "adapter_error", "target": target},
            )
            result = Absent(source=name, reason=f"error: {exc.__class__.__name__}")

        if isinstance(result, Absent):
            log.warning(
                "Adapter absent: %s",
                result.reason,
                extra={"action": "adapter_absent", "target": target},
            )
        else:
            log.debug(
                "Adapter completed in %.2fs",
                time.monotonic() - start,
                extra={"action": "adapter_done", "target": target},
            )
        return result


def _is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True
