"""
Record normaliser for DomainScope.

Turns the heterogeneous payloads returned by the upstream sources into the
fixed schema of :mod:`domainscope.models.report`:

* registration data in either RDAP (structured) or port-43 WHOIS (free
  text) form, dispatched on the :data:`RawRegistration` tag;
* DNS answer sets;
* IP geolocation payloads;
* ``ssl.SSLSocket.getpeercert()`` dictionaries;
* HTTP response headers and body.

Every function here is pure.  Missing or malformed input degrades to the
``UNKNOWN`` sentinel / ``None`` / empty list; nothing raises.
"""

from __future__ import annotations

import re
import ssl
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from domainscope.engine.providers import classify_provider
from domainscope.models.report import (
    DNS_RECORD_TYPES,
    UNKNOWN,
    Absent,
    CertificateInfo,
    DnsRecordSet,
    LegacyTextRecord,
    NetworkInfo,
    RawRegistration,
    RecordDate,
    RegistrationRecord,
    SiteProfile,
    StructuredRecord,
)

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

# Epoch seconds: 9-11 digits covers 1973 through 5138.
_EPOCH_RE = re.compile(r"^\d{9,11}(?:\.\d+)?$")

_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%Y.%m.%d",
    "%Y/%m/%d",
    "%d-%b-%Y",
    "%d-%B-%Y",
    "%d %b %Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%Y%m%d",
)


def parse_date(value: Any) -> RecordDate:
    """Normalise a date from any of the upstream representations.

    Accepted inputs: epoch seconds (``int``/``float`` or a 9-11 digit
    string), ISO-8601 timestamps with optional ``Z`` or offset, ``date`` /
    ``datetime`` objects, and the common WHOIS layouts listed in
    :data:`_DATE_FORMATS`.  Timestamps are converted to UTC before the
    calendar date is taken.

    Returns:
        ``RecordDate()`` when *value* is empty, ``RecordDate(raw, None)``
        when it cannot be parsed.
    """
    if value is None or value == "":
        return RecordDate()

    if isinstance(value, datetime):
        return RecordDate(raw=value.isoformat(), value=_utc_date(value))
    if isinstance(value, date):
        return RecordDate(raw=value.isoformat(), value=value)
    if isinstance(value, bool):
        return RecordDate(raw=str(value))
    if isinstance(value, (int, float)):
        return RecordDate(raw=str(value), value=_from_epoch(value))

    raw = str(value).strip()
    if not raw:
        return RecordDate()

    if _EPOCH_RE.match(raw):
        return RecordDate(raw=raw, value=_from_epoch(float(raw)))

    iso = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        return RecordDate(raw=raw, value=_utc_date(datetime.fromisoformat(iso)))
    except ValueError:
        pass

    # Drop a trailing timezone word ("UTC", "GMT") or fractional seconds
    # before trying the fixed layouts.
    candidate = re.sub(r"\s*(?:UTC|GMT)$", "", raw, flags=re.IGNORECASE)
    candidate = re.sub(r"(\d{2}:\d{2}:\d{2})\.\d+$", r"\1", candidate)
    for fmt in _DATE_FORMATS:
        try:
            return RecordDate(raw=raw, value=datetime.strptime(candidate, fmt).date())
        except ValueError:
            continue

    return RecordDate(raw=raw)


def _from_epoch(seconds: float) -> date | None:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError):
        return None


def _utc_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

# Label synonyms for the free-text WHOIS format, in preference order.
_REGISTRAR_LABELS: tuple[str, ...] = (
    "Registrar",
    "Registrar Name",
    "Sponsoring Registrar",
)
_CREATED_LABELS: tuple[str, ...] = (
    "Creation Date",
    "Created On",
    "Created",
    "Registered on",
    "Registration Time",
    "Issue Date",
)
_EXPIRES_LABELS: tuple[str, ...] = (
    "Registry Expiry Date",
    "Registrar Registration Expiration Date",
    "Expiration Date",
    "Expiry Date",
    "Expiration Time",
    "paid-till",
)
_STATUS_RE = re.compile(r"^[ \t]*(?:Domain )?Status:[ \t]*(.+?)[ \t]*$", re.IGNORECASE | re.MULTILINE)
_STATUS_URL_RE = re.compile(r"\s+\(?https?://\S+\)?$")


def normalize_registration(raw: RawRegistration) -> RegistrationRecord:
    """Dispatch on the raw registration variant and return one record shape."""
    if isinstance(raw, StructuredRecord):
        return _from_rdap(raw.payload)
    if isinstance(raw, LegacyTextRecord):
        return _from_whois_text(raw.text)
    return RegistrationRecord()


def _from_rdap(payload: Mapping[str, Any]) -> RegistrationRecord:
    registrar = UNKNOWN
    for entity in _as_list(payload.get("entities")):
        if not isinstance(entity, Mapping):
            continue
        if "registrar" in _as_list(entity.get("roles")):
            registrar = _vcard_name(entity) or UNKNOWN
            break

    events: dict[str, Any] = {}
    for event in _as_list(payload.get("events")):
        if isinstance(event, Mapping) and event.get("eventAction") not in events:
            events[event.get("eventAction")] = event.get("eventDate")

    return RegistrationRecord(
        registrar=registrar,
        created=parse_date(events.get("registration")),
        expires=parse_date(events.get("expiration")),
        status=_unique(str(s) for s in _as_list(payload.get("status"))),
        source="rdap",
    )


def _vcard_name(entity: Mapping[str, Any]) -> str | None:
    """Return the ``fn`` (or, failing that, ``org``) value of a jCard."""
    vcard = _as_list(entity.get("vcardArray"))
    properties = _as_list(vcard[1]) if len(vcard) > 1 else []
    values: dict[str, str] = {}
    for prop in properties:
        if isinstance(prop, list) and len(prop) > 3 and isinstance(prop[3], str):
            values.setdefault(prop[0], prop[3].strip())
    return values.get("fn") or values.get("org") or None


def _from_whois_text(text: str) -> RegistrationRecord:
    registrar = _labeled_value(text, _REGISTRAR_LABELS)
    statuses = []
    for match in _STATUS_RE.finditer(text):
        statuses.append(_STATUS_URL_RE.sub("", match.group(1)).strip())

    return RegistrationRecord(
        registrar=registrar or UNKNOWN,
        created=parse_date(_labeled_value(text, _CREATED_LABELS)),
        expires=parse_date(_labeled_value(text, _EXPIRES_LABELS)),
        status=_unique(s for s in statuses if s),
        source="whois",
    )


def _labeled_value(text: str, labels: Iterable[str]) -> str | None:
    """Return the value of the first ``Label: value`` line found."""
    for label in labels:
        pattern = re.compile(
            rf"^[ \t]*{re.escape(label)}[ \t]*:[ \t]*(.+?)[ \t]*$",
            re.IGNORECASE | re.MULTILINE,
        )
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


# ---------------------------------------------------------------------------
# DNS
# ---------------------------------------------------------------------------


def normalize_dns(answers: Mapping[str, Iterable[Any]]) -> DnsRecordSet:
    """Build a :class:`DnsRecordSet` covering every type in the fixed set.

    Types missing from *answers* (or mapped to ``None``) become empty lists;
    types outside the fixed set are ignored.
    """
    records: dict[str, list[str]] = {}
    for rtype in DNS_RECORD_TYPES:
        values = answers.get(rtype) or []
        records[rtype] = [str(value) for value in values]
    return DnsRecordSet(records=records)


# ---------------------------------------------------------------------------
# Geolocation
# ---------------------------------------------------------------------------


def normalize_network(ip: str, payload: Optional[Mapping[str, Any]]) -> NetworkInfo:
    """Build a :class:`NetworkInfo` from an ipinfo-style payload."""
    if not payload:
        return NetworkInfo(ip=ip, provider=classify_provider(None))

    org = _text(payload.get("org"))
    return NetworkInfo(
        ip=ip,
        asn=org,
        provider=classify_provider(org),
        country=_text(payload.get("country")),
        region=_text(payload.get("region")),
        city=_text(payload.get("city")),
    )


# ---------------------------------------------------------------------------
# Certificates
# ---------------------------------------------------------------------------


def normalize_certificate(peercert: Optional[Mapping[str, Any]]) -> CertificateInfo | None:
    """Extract issuer and validity window from a ``getpeercert()`` dict."""
    if not peercert:
        return None
    return CertificateInfo(
        issuer=_issuer_name(peercert.get("issuer", ())),
        valid_from=_cert_date(peercert.get("notBefore")),
        valid_to=_cert_date(peercert.get("notAfter")),
    )


def _issuer_name(issuer: Iterable[Any]) -> str | None:
    attrs: dict[str, str] = {}
    for rdn in issuer or ():
        for pair in rdn:
            if len(pair) == 2:
                attrs.setdefault(pair[0], pair[1])
    return attrs.get("organizationName") or attrs.get("commonName")


def _cert_date(value: Optional[str]) -> date | None:
    if not value:
        return None
    try:
        return datetime.fromtimestamp(
            ssl.cert_time_to_seconds(value), tz=timezone.utc
        ).date()
    except (ValueError, OverflowError):
        return None


# ---------------------------------------------------------------------------
# Website
# ---------------------------------------------------------------------------

UNKNOWN_TECHNOLOGY: str = "Unknown"

# (header name, lower-case marker, label).  An empty marker means presence
# of the header is enough.
HEADER_MARKERS: tuple[tuple[str, str, str], ...] = (
    ("server", "nginx", "Nginx"),
    ("server", "apache", "Apache"),
    ("server", "microsoft-iis", "IIS"),
    ("server", "litespeed", "LiteSpeed"),
    ("server", "openresty", "OpenResty"),
    ("server", "caddy", "Caddy"),
    ("server", "gunicorn", "Gunicorn"),
    ("server", "cloudflare", "Cloudflare"),
    ("server", "amazons3", "Amazon S3"),
    ("x-powered-by", "php", "PHP"),
    ("x-powered-by", "asp.net", "ASP.NET"),
    ("x-powered-by", "express", "Express.js"),
    ("x-powered-by", "next.js", "Next.js"),
    ("x-generator", "drupal", "Drupal"),
    ("x-generator", "wordpress", "WordPress"),
    ("x-generator", "joomla", "Joomla"),
    ("cf-ray", "", "Cloudflare"),
    ("x-amz-cf-id", "", "CloudFront"),
    ("x-vercel-id", "", "Vercel"),
    ("x-shopify-stage", "", "Shopify"),
    ("x-github-request-id", "", "GitHub Pages"),
)

# (lower-case marker, label) searched in the response body.
BODY_MARKERS: tuple[tuple[str, str], ...] = (
    ("/wp-content/", "WordPress"),
    ("/wp-includes/", "WordPress"),
    ("sites/default/files", "Drupal"),
    ("/media/jui/", "Joomla"),
    ("cdn.shopify.com", "Shopify"),
    ("/skin/frontend/", "Magento"),
    ("__next_data__", "Next.js"),
    ("/_next/static/", "Next.js"),
    ("__nuxt__", "Nuxt.js"),
    ("ng-version=", "Angular"),
    ("data-reactroot", "React"),
    ("react-dom", "React"),
    ("__vue__", "Vue.js"),
    ("data-v-app", "Vue.js"),
    ("jquery", "jQuery"),
    ("bootstrap.min", "Bootstrap"),
    ("googletagmanager.com", "Google Tag Manager"),
    ("google-analytics.com", "Google Analytics"),
)

# (control, penalty when missing)
SCORE_PENALTIES: dict[str, int] = {
    "hsts": 10,
    "x_frame_options": 5,
    "csp": 5,
    "x_content_type_options": 5,
}


def detect_technologies(headers: Mapping[str, str], body: str) -> list[str]:
    """Return sorted technology labels found in *headers* and *body*.

    ``["Unknown"]`` is returned when no marker matches.
    """
    lowered = {str(k).lower(): str(v).lower() for k, v in headers.items()}
    found: set[str] = set()

    for header, marker, label in HEADER_MARKERS:
        value = lowered.get(header)
        if value is not None and marker in value:
            found.add(label)

    body_lower = body.lower()
    for marker, label in BODY_MARKERS:
        if marker in body_lower:
            found.add(label)

    return sorted(found) if found else [UNKNOWN_TECHNOLOGY]


def security_score(controls: Mapping[str, bool]) -> int:
    """Start from 100 and subtract the penalty of every missing control."""
    score = 100
    for control, penalty in SCORE_PENALTIES.items():
        if not controls.get(control, False):
            score -= penalty
    return max(score, 0)


def profile_site(
    status: int,
    scheme: str,
    headers: Mapping[str, str],
    body: str,
) -> SiteProfile:
    """Build a :class:`SiteProfile` from one HTTP response."""
    names = {str(k).lower() for k in headers.keys()}
    controls = {
        "hsts": "strict-transport-security" in names,
        "x_frame_options": "x-frame-options" in names,
        "csp": "content-security-policy" in names,
        "x_content_type_options": "x-content-type-options" in names,
    }
    server = next(
        (str(v) for k, v in headers.items() if str(k).lower() == "server"), None
    )
    return SiteProfile(
        status=status,
        server=server,
        technologies=detect_technologies(headers, body),
        https=scheme == "https",
        score=security_score(controls),
        **controls,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))
