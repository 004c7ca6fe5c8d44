"""
Shared pytest fixtures for the DomainScope test suite.

Provides stub source adapters, an aggregator wired to them, a FastAPI test
application with the aggregator dependency overridden, and factory fixtures
for common report entities.
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from domainscope.engine.aggregator import DomainAggregator
from domainscope.models.report import (
    Absent,
    DnsRecordSet,
    NetworkInfo,
    RecordDate,
    RegistrationRecord,
)
from domainscope.modules.base import BaseSourceAdapter

ADAPTER_NAMES: tuple[str, ...] = ("registration", "dns", "geolocation", "certificate", "site")

# Reference time used by the correlation tests: midday UTC so that a date
# N days ahead is N - 0.5 days away and rounds up to N.
FIXED_NOW: datetime = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class StubAdapter(BaseSourceAdapter):
    """Source adapter returning canned results.

    Args:
        name: Adapter name the stub stands in for.
        result: Returned for any target not listed in *per_target*.
            ``None`` means :class:`Absent`.
        per_target: Target-specific results (e.g. one per IP).
        delay: Seconds to sleep before answering.
        error: Exception raised instead of answering.
    """

    def __init__(
        self,
        name: str,
        result: Any = None,
        per_target: Optional[dict[str, Any]] = None,
        delay: float = 0.0,
        error: Optional[BaseException] = None,
    ) -> None:
        self.name = name
        self._result = result
        self._per_target = per_target or {}
        self._delay = delay
        self._error = error
        self.calls: list[str] = []
        self.cancelled = False

    async def fetch(self, target: str, timeout: float) -> Any:
        self.calls.append(target)
        if self._delay:
            try:
                await asyncio.sleep(self._delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self._error is not None:
            raise self._error
        if target in self._per_target:
            return self._per_target[target]
        if self._result is None:
            return Absent(source=self.name, reason="stub")
        return self._result


def make_absent_adapters() -> dict[str, StubAdapter]:
    return {name: StubAdapter(name) for name in ADAPTER_NAMES}


def make_dns(**records: list[str]) -> DnsRecordSet:
    dns_set = DnsRecordSet()
    for rtype, values in records.items():
        dns_set.records[rtype] = list(values)
    return dns_set


def make_registration(
    registrar: str = "GoDaddy.com, LLC",
    expires: Optional[date] = None,
) -> RegistrationRecord:
    return RegistrationRecord(
        registrar=registrar,
        created=RecordDate(raw="1997-09-15T04:00:00Z", value=date(1997, 9, 15)),
        expires=(
            RecordDate(raw=expires.isoformat(), value=expires)
            if expires is not None
            else RecordDate()
        ),
        status=["clientTransferProhibited"],
        source="rdap",
    )


# ---------------------------------------------------------------------------
# Adapter / aggregator fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def absent_adapters() -> dict[str, StubAdapter]:
    """Every adapter forced to :class:`Absent`."""
    return make_absent_adapters()


@pytest.fixture()
def scenario_adapters() -> dict[str, StubAdapter]:
    """GoDaddy-registered domain expiring in 20 days, hosted on Cloudflare."""
    expires = datetime.now(timezone.utc).date() + timedelta(days=20)
    adapters = make_absent_adapters()
    adapters["registration"] = StubAdapter(
        "registration", result=make_registration("GoDaddy", expires)
    )
    adapters["dns"] = StubAdapter("dns", result=make_dns(A=["104.16.1.1"]))
    adapters["geolocation"] = StubAdapter(
        "geolocation",
        per_target={
            "104.16.1.1": NetworkInfo(
                ip="104.16.1.1",
                asn="AS13335 Cloudflare, Inc.",
                provider="Cloudflare",
                country="US",
            )
        },
    )
    return adapters


@pytest.fixture()
def aggregator(absent_adapters: dict[str, StubAdapter]) -> DomainAggregator:
    return DomainAggregator(adapters=absent_adapters)


# ---------------------------------------------------------------------------
# FastAPI application with aggregator override
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture()
async def test_app(absent_adapters: dict[str, StubAdapter]):
    """Return a FastAPI application whose aggregator uses all-absent stubs.

    Tests needing other adapters replace the override on the returned app.
    """
    from domainscope.api.deps import get_aggregator
    from domainscope.main import create_app

    stub_aggregator = DomainAggregator(adapters=absent_adapters)

    app = create_app()
    app.dependency_overrides[get_aggregator] = lambda: stub_aggregator

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx.AsyncClient wired to the test FastAPI app."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
