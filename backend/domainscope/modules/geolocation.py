"""
IP geolocation adapter for DomainScope.

Queries an ipinfo-compatible service for the organisation (ASN) string and
location of one IP address, then classifies the organisation into a
canonical hosting provider label.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from domainscope.config import get_settings
from domainscope.engine.normalizer import normalize_network
from domainscope.models.report import Absent, NetworkInfo
from domainscope.modules.base import BaseSourceAdapter
from domainscope.modules.registry import AdapterRegistry

logger = logging.getLogger(__name__)


@AdapterRegistry.register
class GeolocationAdapter(BaseSourceAdapter):
    """IP -> organisation / country / region / city lookup."""

    name: str = "geolocation"
    description: str = "IP organisation and geolocation lookup"

    async def fetch(self, target: str, timeout: float) -> NetworkInfo | Absent:
        """Look up *target*, which is an IP literal resolved from DNS."""
        settings = get_settings()
        url = f"{settings.IPINFO_URL.rstrip('/')}/{target}/json"
        params = {"token": settings.IPINFO_TOKEN} if settings.IPINFO_TOKEN else None

        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as client:
                response = await client.get(url, params=params)
        except httpx.TimeoutException:
            return self.absent("geolocation timeout")
        except httpx.HTTPError as exc:
            logger.debug("Geolocation request for %s failed: %s", target, exc)
            return self.absent(f"geolocation error: {exc.__class__.__name__}")

        if response.status_code != 200:
            return self.absent(f"geolocation http {response.status_code}")

        try:
            payload: Any = response.json()
        except ValueError:
            return self.absent("geolocation malformed json")

        if not isinstance(payload, dict) or payload.get("bogon"):
            return self.absent("geolocation unexpected payload")

        return normalize_network(target, payload)
