"""
Shared FastAPI dependency functions for the DomainScope API.

Provides the aggregator instance and the domain presence check that every
report endpoint relies on.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import HTTPException, Query, status

from domainscope.core.validation import InvalidDomainQuery, require_domain
from domainscope.engine.aggregator import DomainAggregator


@lru_cache(maxsize=1)
def get_aggregator() -> DomainAggregator:
    """Return the process-wide aggregator.

    The aggregator is stateless across requests, so sharing one instance
    is safe.  Tests override this dependency with an aggregator built from
    stub adapters.
    """
    return DomainAggregator()


async def validate_domain_query(
    domain: Optional[str] = Query(
        None,
        description="Domain name to investigate (e.g. ``example.com``).",
        examples=["example.com"],
    ),
) -> str:
    """Return the stripped ``domain`` query parameter or raise 400.

    Raises:
        HTTPException: *400 Bad Request* if the parameter is missing or blank.
    """
    try:
        return require_domain(domain)
    except InvalidDomainQuery as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
