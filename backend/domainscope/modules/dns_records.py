"""
DNS record adapter for DomainScope.

Resolves every record type in the fixed set (A, AAAA, CNAME, NS, MX, TXT,
PTR, SRV, SOA, CAA, DS, DNSKEY) for the target domain.  Each type is an
independent query with its own timeout, so a missing AAAA never holds up
the A lookup.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

from domainscope.config import get_settings
from domainscope.engine.normalizer import normalize_dns
from domainscope.models.report import DNS_RECORD_TYPES, DnsRecordSet
from domainscope.modules.base import BaseSourceAdapter
from domainscope.modules.registry import AdapterRegistry

logger = logging.getLogger(__name__)


@AdapterRegistry.register
class DnsRecordsAdapter(BaseSourceAdapter):
    """DNS record enumeration for the target domain.

    Uses the ``dnspython`` async resolver.  Common negative responses
    (NXDOMAIN, NoAnswer, NoNameservers, Timeout) and any other resolver
    error turn into an empty list for that type only.  The adapter never
    returns :class:`Absent`; an unresolvable domain is simply a record set
    full of empty lists.
    """

    name: str = "dns"
    description: str = "DNS Record Enumeration"

    RECORD_TYPES: tuple[str, ...] = DNS_RECORD_TYPES

    async def fetch(self, target: str, timeout: float) -> DnsRecordSet:
        start: float = time.monotonic()
        try:
            resolver = self._build_resolver(timeout)
        except dns.exception.DNSException as exc:
            logger.warning("No usable DNS resolver configuration: %s", exc)
            return normalize_dns({})

        async def _query(rtype: str) -> list[str]:
            try:
                return await asyncio.wait_for(
                    self._resolve_record(resolver, target, rtype),
                    timeout=timeout,
                )
            except asyncio.TimeoutError:
                logger.debug("DNS %s for %s timed out", rtype, target)
            except Exception as exc:  # noqa: BLE001
                logger.debug("DNS %s for %s: %s", rtype, target, exc)
            return []

        values = await asyncio.gather(*(_query(rtype) for rtype in self.RECORD_TYPES))
        records = normalize_dns(dict(zip(self.RECORD_TYPES, values)))

        logger.debug(
            "DNS resolved %d/%d record types for %s in %.2fs",
            sum(1 for v in values if v),
            len(self.RECORD_TYPES),
            target,
            time.monotonic() - start,
        )
        return records

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_resolver(timeout: float) -> dns.asyncresolver.Resolver:
        nameservers = get_settings().DNS_NAMESERVERS
        resolver = dns.asyncresolver.Resolver(configure=not nameservers)
        if nameservers:
            resolver.nameservers = list(nameservers)
        resolver.timeout = min(3.0, timeout)
        resolver.lifetime = timeout
        return resolver

    @staticmethod
    async def _resolve_record(
        resolver: dns.asyncresolver.Resolver,
        domain: str,
        rtype: str,
    ) -> list[str]:
        """Resolve a single record type for *domain*.

        Returns an empty list for the well-known negative responses so the
        caller can treat them like any other absence.
        """
        try:
            answer: Optional[dns.resolver.Answer] = await resolver.resolve(domain, rtype)
        except (
            dns.resolver.NXDOMAIN,
            dns.resolver.NoAnswer,
            dns.resolver.NoNameservers,
            dns.exception.Timeout,
        ):
            return []
        return [str(rdata) for rdata in answer] if answer is not None else []
