"""
Pydantic schemas for the DomainScope API.

Re-exports the response models so that endpoint modules can import them
directly from ``domainscope.api.schemas``.
"""

from domainscope.api.schemas.report import (
    CertificateSchema,
    DomainReportResponse,
    NetworkSchema,
    SecurityHeadersSchema,
    WebsiteSchema,
    WhoisSchema,
)

__all__: list[str] = [
    "CertificateSchema",
    "DomainReportResponse",
    "NetworkSchema",
    "SecurityHeadersSchema",
    "WebsiteSchema",
    "WhoisSchema",
]
