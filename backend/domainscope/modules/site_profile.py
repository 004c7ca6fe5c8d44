"""
Website profile adapter for DomainScope.

Issues one HTTP GET to the domain (HTTPS first, plain HTTP when the TLS
endpoint cannot be reached), fingerprints the technology stack from
response headers and body markers, and scores the security-header posture.
Only the head of the body is downloaded.
"""

from __future__ import annotations

import logging

import httpx

from domainscope.engine.normalizer import profile_site
from domainscope.models.report import Absent, SiteProfile
from domainscope.modules.base import BaseSourceAdapter
from domainscope.modules.registry import AdapterRegistry

logger = logging.getLogger(__name__)

# Bytes of body read for marker detection; the rest is never downloaded.
_BODY_LIMIT: int = 200_000

_USER_AGENT: str = "Mozilla/5.0 (compatible; DomainScope/1.0)"


@AdapterRegistry.register
class SiteProfileAdapter(BaseSourceAdapter):
    """HTTP fingerprinting and security header scoring.

    A final response outside the 2xx range is reported as :class:`Absent`.
    """

    name: str = "site"
    description: str = "Website technology fingerprint and security headers"

    async def fetch(self, target: str, timeout: float) -> SiteProfile | Absent:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            verify=False,  # noqa: S501 -- fingerprint sites with broken certs too
            headers={"User-Agent": _USER_AGENT},
        ) as client:
            page = await self._fetch_page(client, target)

        if page is None:
            return self.absent("website unreachable")

        response, body = page
        if not response.is_success:
            return self.absent(f"website http {response.status_code}")

        return profile_site(
            status=response.status_code,
            scheme=response.url.scheme,
            headers=response.headers,
            body=body,
        )

    @staticmethod
    async def _fetch_page(
        client: httpx.AsyncClient, domain: str
    ) -> tuple[httpx.Response, str] | None:
        """Try HTTPS then HTTP; return the response and the head of its body."""
        for scheme in ("https", "http"):
            url = f"{scheme}://{domain}"
            try:
                async with client.stream("GET", url) as response:
                    body = ""
                    if response.is_success:
                        body = await _read_head(response, _BODY_LIMIT)
                    return response, body
            except httpx.TimeoutException:
                logger.debug("Timeout connecting to %s", url)
            except httpx.HTTPError as exc:
                logger.debug("Error probing %s: %s", url, exc)
        return None


async def _read_head(response: httpx.Response, limit: int) -> str:
    """Read at most *limit* bytes of a streamed body and decode them."""
    buffer = bytearray()
    async for chunk in response.aiter_bytes():
        buffer.extend(chunk)
        if len(buffer) >= limit:
            break

    head = bytes(buffer[:limit])
    try:
        return head.decode(response.charset_encoding or "utf-8", errors="replace")
    except LookupError:
        return head.decode("utf-8", errors="replace")
