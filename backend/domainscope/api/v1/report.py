"""
Domain report endpoint.

``GET /check?domain=...`` aggregates every signal source for the domain,
runs the correlation engine over the result and returns the composite
report.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from domainscope.api.deps import get_aggregator, validate_domain_query
from domainscope.api.schemas.report import DomainReportResponse
from domainscope.engine.aggregator import DomainAggregator
from domainscope.engine.correlation import correlate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/check",
    response_model=DomainReportResponse,
    summary="Build the composite report for a domain",
)
async def check_domain(
    domain: str = Depends(validate_domain_query),
    aggregator: DomainAggregator = Depends(get_aggregator),
) -> DomainReportResponse:
    """Aggregate registration, DNS, network, TLS and website signals.

    Sources that fail or time out appear as ``"unknown"``, ``null`` or an
    empty list; they never fail the request.

    Args:
        domain: The domain to investigate (validated for presence).
        aggregator: The aggregator instance (injected).

    Returns:
        The :class:`DomainReportResponse` including correlation alerts.
    """
    report = await aggregator.aggregate(domain)
    report.alerts = correlate(report)
    logger.info("Report for %s produced %d alerts", domain, len(report.alerts))
    return DomainReportResponse.model_validate(report.to_dict())
