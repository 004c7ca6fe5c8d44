"""
DomainScope report models package.

Re-exports every model class so that consumers can import directly from
``domainscope.models`` instead of reaching into individual submodules::

    from domainscope.models import DomainReport, RegistrationRecord, Absent
"""

from domainscope.models.report import (
    DNS_RECORD_TYPES,
    OTHER_PROVIDER,
    UNKNOWN,
    Absent,
    CertificateInfo,
    DnsRecordSet,
    DomainReport,
    LegacyTextRecord,
    NetworkInfo,
    RawRegistration,
    RecordDate,
    RegistrationRecord,
    SiteProfile,
    StructuredRecord,
)

__all__: list[str] = [
    "DNS_RECORD_TYPES",
    "OTHER_PROVIDER",
    "UNKNOWN",
    "Absent",
    "CertificateInfo",
    "DnsRecordSet",
    "DomainReport",
    "LegacyTextRecord",
    "NetworkInfo",
    "RawRegistration",
    "RecordDate",
    "RegistrationRecord",
    "SiteProfile",
    "StructuredRecord",
]
