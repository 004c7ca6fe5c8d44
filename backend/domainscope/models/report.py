"""
Domain report data model.

Every structure here is built fresh for a single request and discarded once
the composite report has been serialised.  The :class:`DomainReport` is the
aggregate root; everything else hangs off it.

Absence is data: a source that produced nothing is represented by the
``UNKNOWN`` sentinel, ``None``, or an empty sequence, never by an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Union

UNKNOWN: str = "unknown"
"""Sentinel for a text field whose source produced no value."""

OTHER_PROVIDER: str = "Other"
"""Catch-all canonical provider label."""

DNS_RECORD_TYPES: tuple[str, ...] = (
    "A", "AAAA", "CNAME", "NS", "MX", "TXT",
    "PTR", "SRV", "SOA", "CAA", "DS", "DNSKEY",
)
"""The fixed, ordered set of record types queried for every domain."""


# ---------------------------------------------------------------------------
# Raw adapter output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Absent:
    """Explicit "no data" outcome of a source adapter.

    Attributes:
        source: Name of the adapter that produced nothing.
        reason: Short human-readable cause (timeout, HTTP status, ...).
    """

    source: str
    reason: str = ""


@dataclass(frozen=True)
class StructuredRecord:
    """A structured registry (RDAP) response body."""

    payload: dict[str, Any]


@dataclass(frozen=True)
class LegacyTextRecord:
    """A free-text port-43 WHOIS response."""

    text: str


RawRegistration = Union[StructuredRecord, LegacyTextRecord, Absent]


# ---------------------------------------------------------------------------
# Normalised entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecordDate:
    """A calendar date that keeps "unknown" apart from "unparsable".

    Attributes:
        raw:   The value as the source delivered it, or ``None`` when the
               source had no such field.
        value: The parsed calendar date, or ``None`` when ``raw`` could not
               be interpreted.
    """

    raw: str | None = None
    value: date | None = None

    @property
    def known(self) -> bool:
        return self.raw is not None

    @property
    def parsed(self) -> bool:
        return self.value is not None

    def serialize(self) -> str:
        if self.value is not None:
            return self.value.isoformat()
        if self.raw is not None:
            return self.raw
        return UNKNOWN


@dataclass
class RegistrationRecord:
    """Normalised domain registration data.

    Attributes:
        registrar: Registrar display name or :data:`UNKNOWN`.
        created:   Registration date.
        expires:   Expiration date.
        status:    Ordered, de-duplicated EPP status codes.
        source:    ``"rdap"``, ``"whois"`` or ``"none"``.
    """

    registrar: str = UNKNOWN
    created: RecordDate = field(default_factory=RecordDate)
    expires: RecordDate = field(default_factory=RecordDate)
    status: list[str] = field(default_factory=list)
    source: str = "none"

    @property
    def registrar_known(self) -> bool:
        return bool(self.registrar) and self.registrar != UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        return {
            "registrar": self.registrar,
            "created": self.created.serialize(),
            "expires": self.expires.serialize(),
            "status": list(self.status),
            "source": self.source,
        }


@dataclass
class DnsRecordSet:
    """Record type -> ordered answer values, always covering every type."""

    records: dict[str, list[str]] = field(
        default_factory=lambda: {rtype: [] for rtype in DNS_RECORD_TYPES}
    )

    def get(self, rtype: str) -> list[str]:
        return self.records.get(rtype, [])

    def addresses(self) -> list[str]:
        """Distinct A then AAAA values in first-seen order."""
        seen: dict[str, None] = {}
        for rtype in ("A", "AAAA"):
            for value in self.get(rtype):
                seen.setdefault(value, None)
        return list(seen)

    def to_dict(self) -> dict[str, list[str]]:
        return {rtype: list(self.get(rtype)) for rtype in DNS_RECORD_TYPES}


@dataclass
class NetworkInfo:
    """Hosting network details for one resolved IP address."""

    ip: str
    asn: str | None = None
    provider: str = OTHER_PROVIDER
    country: str | None = None
    region: str | None = None
    city: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ip": self.ip,
            "asn": self.asn,
            "provider": self.provider,
            "country": self.country,
            "region": self.region,
            "city": self.city,
        }


@dataclass
class CertificateInfo:
    """TLS certificate metadata read from the peer on port 443."""

    issuer: str | None = None
    valid_from: date | None = None
    valid_to: date | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "issuer": self.issuer,
            "valid_from": self.valid_from.isoformat() if self.valid_from else None,
            "valid_to": self.valid_to.isoformat() if self.valid_to else None,
        }


@dataclass
class SiteProfile:
    """HTTP fingerprint and security-header posture of the website.

    ``technologies`` is kept sorted so that two profiles built from the same
    response serialise identically.
    """

    status: int
    server: str | None = None
    technologies: list[str] = field(default_factory=list)
    https: bool = False
    hsts: bool = False
    x_frame_options: bool = False
    csp: bool = False
    x_content_type_options: bool = False
    score: int = 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "server": self.server,
            "technologies": list(self.technologies),
            "https": self.https,
            "security_headers": {
                "strict_transport_security": self.hsts,
                "x_frame_options": self.x_frame_options,
                "content_security_policy": self.csp,
                "x_content_type_options": self.x_content_type_options,
            },
            "score": self.score,
        }


@dataclass
class DomainReport:
    """Composite report for one domain -- the aggregate root."""

    domain: str
    registration: RegistrationRecord = field(default_factory=RegistrationRecord)
    dns: DnsRecordSet = field(default_factory=DnsRecordSet)
    ip_networks: list[NetworkInfo] = field(default_factory=list)
    certificate: CertificateInfo | None = None
    site: SiteProfile | None = None
    alerts: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready composite shape served by the API."""
        return {
            "domain": self.domain,
            "whois": self.registration.to_dict(),
            "dns": self.dns.to_dict(),
            "ip_networks": [network.to_dict() for network in self.ip_networks],
            "ssl": self.certificate.to_dict() if self.certificate else None,
            "website": self.site.to_dict() if self.site else None,
            "alerts": list(self.alerts),
        }
