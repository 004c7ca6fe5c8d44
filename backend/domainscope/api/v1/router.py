"""
Aggregated APIRouter for API version 1.

All v1 endpoint routers are included here and exposed as a single ``router``
instance that is mounted by the FastAPI application in ``domainscope.main``.
The prefix ``/api/v1`` is applied by the application.
"""

from __future__ import annotations

from fastapi import APIRouter

from domainscope.api.v1 import report

router = APIRouter()

router.include_router(
    report.router,
    tags=["report"],
)
