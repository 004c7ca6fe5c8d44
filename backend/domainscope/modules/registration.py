"""
Registration data adapter for DomainScope.

Looks the domain up over RDAP at the registry responsible for its TLD
(falling back to a generic bootstrap aggregator for unrouted TLDs).  When
RDAP yields nothing, the legacy port-43 WHOIS text is fetched through
``python-whois`` instead.  Both raw forms are normalised into one
:class:`~domainscope.models.report.RegistrationRecord`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Mapping, Optional

import httpx
import whois  # python-whois

from domainscope.config import get_rdap_routes, get_settings
from domainscope.engine.normalizer import normalize_registration
from domainscope.models.report import (
    Absent,
    LegacyTextRecord,
    RawRegistration,
    RegistrationRecord,
    StructuredRecord,
)
from domainscope.modules.base import BaseSourceAdapter
from domainscope.modules.registry import AdapterRegistry

logger = logging.getLogger(__name__)


def resolve_rdap_endpoint(
    domain: str,
    routes: Optional[Mapping[str, str]] = None,
    fallback: Optional[str] = None,
) -> str:
    """Return the RDAP base URL responsible for *domain*.

    The last label is matched exactly (case-insensitive) against the
    routing table; unmatched TLDs use the fallback aggregator.
    """
    if routes is None:
        routes = get_rdap_routes()
    if fallback is None:
        fallback = get_settings().RDAP_FALLBACK_URL

    tld = domain.rstrip(".").rsplit(".", 1)[-1].lower()
    base = routes.get(tld, fallback)
    return base if base.endswith("/") else f"{base}/"


@AdapterRegistry.register
class RegistrationAdapter(BaseSourceAdapter):
    """RDAP lookup with a WHOIS text fallback.

    Returns a :class:`RegistrationRecord` when either protocol produced
    data, otherwise :class:`Absent`.
    """

    name: str = "registration"
    description: str = "Domain registration data (RDAP, WHOIS fallback)"

    async def fetch(self, target: str, timeout: float) -> RegistrationRecord | Absent:
        start: float = time.monotonic()

        raw: RawRegistration = await self._fetch_rdap(target, timeout)
        if isinstance(raw, Absent) and get_settings().WHOIS_FALLBACK_ENABLED:
            logger.debug("RDAP absent for %s (%s), trying WHOIS", target, raw.reason)
            raw = await self._fetch_whois(target, timeout)

        if isinstance(raw, Absent):
            return raw

        record = normalize_registration(raw)
        logger.debug(
            "Registration for %s via %s in %.2fs",
            target,
            record.source,
            time.monotonic() - start,
        )
        return record

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch_rdap(self, domain: str, timeout: float) -> StructuredRecord | Absent:
        url = f"{resolve_rdap_endpoint(domain)}domain/{domain}"
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout),
                follow_redirects=True,
                headers={"Accept": "application/rdap+json, application/json"},
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            return self.absent("rdap timeout")
        except httpx.HTTPError as exc:
            logger.debug("RDAP request to %s failed: %s", url, exc)
            return self.absent(f"rdap error: {exc.__class__.__name__}")

        if response.status_code != 200:
            return self.absent(f"rdap http {response.status_code}")

        try:
            payload: Any = response.json()
        except ValueError:
            return self.absent("rdap malformed json")

        if not isinstance(payload, dict):
            return self.absent("rdap unexpected payload")
        return StructuredRecord(payload=payload)

    async def _fetch_whois(self, domain: str, timeout: float) -> LegacyTextRecord | Absent:
        loop = asyncio.get_running_loop()
        try:
            response = await asyncio.wait_for(
                loop.run_in_executor(None, whois.whois, domain),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            return self.absent("whois timeout")
        except Exception as exc:  # noqa: BLE001
            logger.debug("WHOIS lookup for %s failed: %s", domain, exc)
            return self.absent(f"whois error: {exc.__class__.__name__}")

        text = getattr(response, "text", None)
        if not isinstance(text, str) or not text.strip():
            return self.absent("whois empty")
        return LegacyTextRecord(text=text)
