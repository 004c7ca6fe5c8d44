"""
Input checks performed before any source is contacted.

The domain is treated as opaque: only presence is checked here.  Anything
stricter (IDNA, label syntax) belongs to the caller.
"""

from __future__ import annotations

from typing import Optional


class DomainScopeError(Exception):
    """Base class for errors raised by the DomainScope engine."""


class InvalidDomainQuery(DomainScopeError, ValueError):
    """Raised when the requested domain is missing or blank."""


def require_domain(domain: Optional[str]) -> str:
    """Return *domain* stripped of surrounding whitespace.

    Raises:
        InvalidDomainQuery: If the domain is ``None`` or blank.
    """
    if domain is None or not domain.strip():
        raise InvalidDomainQuery("Missing domain")
    return domain.strip()
