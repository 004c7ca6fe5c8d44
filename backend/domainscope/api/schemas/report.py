"""
Pydantic v2 schemas for the domain report API response.

The shape mirrors :meth:`domainscope.models.report.DomainReport.to_dict`;
responses are built with ``DomainReportResponse.model_validate(report.to_dict())``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WhoisSchema(BaseModel):
    """Registration data.

    Attributes:
        registrar: Registrar name or ``"unknown"``.
        created: ISO date, the raw upstream text when unparsable, or ``"unknown"``.
        expires: Same encoding as ``created``.
        status: EPP status codes.
        source: ``rdap``, ``whois`` or ``none``.
    """

    registrar: str
    created: str
    expires: str
    status: list[str] = Field(default_factory=list)
    source: str = "none"


class NetworkSchema(BaseModel):
    """Hosting network of one resolved IP."""

    ip: str
    asn: Optional[str] = None
    provider: str
    country: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None


class CertificateSchema(BaseModel):
    """TLS certificate metadata."""

    issuer: Optional[str] = None
    valid_from: Optional[str] = None
    valid_to: Optional[str] = None


class SecurityHeadersSchema(BaseModel):
    strict_transport_security: bool
    x_frame_options: bool
    content_security_policy: bool
    x_content_type_options: bool


class WebsiteSchema(BaseModel):
    """Website fingerprint and security posture.

    Attributes:
        status: HTTP status code of the final response.
        server: ``Server`` header value.
        technologies: Detected technology labels, ``["Unknown"]`` if none.
        https: Whether the final response was served over HTTPS.
        security_headers: Presence of the scored security headers.
        score: Security score in ``[0, 100]``.
    """

    status: int
    server: Optional[str] = None
    technologies: list[str]
    https: bool
    security_headers: SecurityHeadersSchema
    score: int = Field(..., ge=0, le=100)


class DomainReportResponse(BaseModel):
    """Composite report returned by ``GET /api/v1/check``."""

    domain: str
    whois: WhoisSchema
    dns: dict[str, list[str]]
    ip_networks: list[NetworkSchema]
    ssl: Optional[CertificateSchema] = None
    website: Optional[WebsiteSchema] = None
    alerts: list[str]

    model_config = ConfigDict(from_attributes=True)
