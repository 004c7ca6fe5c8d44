"""
Provider classifier.

Maps a free-text network organisation string (as returned by IP
geolocation services, e.g. ``"AS16509 Amazon.com, Inc."``) to a canonical
hosting provider label.
"""

from __future__ import annotations

from typing import Optional

from domainscope.models.report import OTHER_PROVIDER

# Ordered (keyword, label) pairs.  Matching is case-insensitive substring
# containment and the first hit wins, so the order is part of the contract.
PROVIDER_RULES: tuple[tuple[str, str], ...] = (
    ("INET", "INET"),
    ("VNPT", "VNPT"),
    ("VIETTEL", "Viettel"),
    ("FPT", "FPT"),
    ("CLOUDFLARE", "Cloudflare"),
    ("AMAZON", "AWS"),
    ("GOOGLE", "Google"),
    ("MICROSOFT", "Azure"),
    ("DIGITALOCEAN", "DigitalOcean"),
    ("HETZNER", "Hetzner"),
    ("OVH", "OVH"),
    ("AKAMAI", "Akamai"),
    ("FASTLY", "Fastly"),
    ("ALIBABA", "Alibaba"),
)

PROVIDER_LABELS: tuple[str, ...] = tuple(label for _, label in PROVIDER_RULES) + (
    OTHER_PROVIDER,
)


def classify_provider(organization: Optional[str]) -> str:
    """Return the canonical provider label for *organization*.

    Args:
        organization: Raw organisation / ASN string.  ``None`` and the
            empty string are accepted.

    Returns:
        One of :data:`PROVIDER_LABELS`; ``"Other"`` when nothing matches.
    """
    if not organization:
        return OTHER_PROVIDER

    upper = organization.upper()
    for keyword, label in PROVIDER_RULES:
        if keyword in upper:
            return label
    return OTHER_PROVIDER
