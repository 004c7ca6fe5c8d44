"""
TLS certificate adapter for DomainScope.

Opens a verified TLS connection to the domain on port 443, reads the peer
certificate (issuer organisation and validity window) and closes the
connection.  Uses only Python's built-in ``ssl`` module.
"""

from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Any, Optional

from domainscope.engine.normalizer import normalize_certificate
from domainscope.models.report import Absent, CertificateInfo
from domainscope.modules.base import BaseSourceAdapter
from domainscope.modules.registry import AdapterRegistry

logger = logging.getLogger(__name__)

HTTPS_PORT: int = 443


@AdapterRegistry.register
class CertificateAdapter(BaseSourceAdapter):
    """Peer certificate metadata on port 443.

    A handshake that cannot complete (refused, timed out, untrusted chain,
    hostname mismatch) is reported as :class:`Absent`.
    """

    name: str = "certificate"
    description: str = "TLS certificate metadata"

    async def fetch(self, target: str, timeout: float) -> CertificateInfo | Absent:
        try:
            peercert = await self._get_peer_certificate(target, timeout)
        except asyncio.TimeoutError:
            return self.absent("tls timeout")
        except (ssl.SSLError, ssl.CertificateError) as exc:
            logger.debug("TLS handshake with %s failed: %s", target, exc)
            return self.absent("tls handshake failed")
        except OSError as exc:
            logger.debug("TLS connect to %s failed: %s", target, exc)
            return self.absent("tls connect failed")

        certificate = normalize_certificate(peercert)
        if certificate is None:
            return self.absent("no certificate")
        return certificate

    @staticmethod
    async def _get_peer_certificate(
        domain: str, timeout: float
    ) -> Optional[dict[str, Any]]:
        """Perform the handshake and return the parsed ``getpeercert()`` dict."""
        ctx = ssl.create_default_context()
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(domain, HTTPS_PORT, ssl=ctx, server_hostname=domain),
            timeout=timeout,
        )
        try:
            ssl_object = writer.get_extra_info("ssl_object")
            return ssl_object.getpeercert() if ssl_object else None
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except (OSError, ssl.SSLError):
                pass
