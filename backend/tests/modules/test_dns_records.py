"""
Tests for the DNS record adapter.

Validates that every record type is queried, that failures of one type do
not affect the others, and that a broken resolver configuration degrades to
an empty record set.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import dns.exception
import dns.resolver
import pytest

from domainscope.models.report import DNS_RECORD_TYPES, DnsRecordSet
from domainscope.modules.dns_records import DnsRecordsAdapter

ANSWERS: dict[str, list[str]] = {
    "A": ["93.184.215.14"],
    "AAAA": ["2606:2800:21f:cb07:6820:80da:af6b:8b2c"],
    "NS": ["a.iana-servers.net.", "b.iana-servers.net."],
    "MX": ["0 ."],
    "TXT": ['"v=spf1 -all"'],
}


async def _fake_resolve(resolver, domain: str, rtype: str) -> list[str]:
    return ANSWERS.get(rtype, [])


@pytest.mark.asyncio
async def test_all_record_types_queried() -> None:
    with patch.object(
        DnsRecordsAdapter, "_build_resolver", return_value=MagicMock()
    ), patch.object(
        DnsRecordsAdapter, "_resolve_record", new_callable=AsyncMock
    ) as mock_resolve:
        mock_resolve.side_effect = _fake_resolve

        result = await DnsRecordsAdapter().fetch("example.com", timeout=5)

    assert isinstance(result, DnsRecordSet)
    assert result.get("A") == ["93.184.215.14"]
    assert result.get("NS") == ["a.iana-servers.net.", "b.iana-servers.net."]
    assert result.get("CNAME") == []
    assert list(result.to_dict()) == list(DNS_RECORD_TYPES)

    queried = sorted(call.args[2] for call in mock_resolve.await_args_list)
    assert queried == sorted(DNS_RECORD_TYPES)


@pytest.mark.asyncio
async def test_failing_type_does_not_affect_others() -> None:
    async def flaky(resolver, domain: str, rtype: str) -> list[str]:
        if rtype == "MX":
            raise dns.exception.DNSException("SERVFAIL")
        return ANSWERS.get(rtype, [])

    with patch.object(
        DnsRecordsAdapter, "_build_resolver", return_value=MagicMock()
    ), patch.object(
        DnsRecordsAdapter, "_resolve_record", new_callable=AsyncMock, side_effect=flaky
    ):
        result = await DnsRecordsAdapter().fetch("example.com", timeout=5)

    assert result.get("MX") == []
    assert result.get("A") == ["93.184.215.14"]
    assert result.get("TXT") == ['"v=spf1 -all"']


@pytest.mark.asyncio
async def test_unconfigurable_resolver_gives_empty_set() -> None:
    with patch.object(
        DnsRecordsAdapter,
        "_build_resolver",
        side_effect=dns.resolver.NoResolverConfiguration("no nameservers"),
    ):
        result = await DnsRecordsAdapter().fetch("example.com", timeout=5)

    assert result.to_dict() == {rtype: [] for rtype in DNS_RECORD_TYPES}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        dns.resolver.NXDOMAIN(),
        dns.resolver.NoAnswer(),
        dns.resolver.NoNameservers(),
        dns.exception.Timeout(),
    ],
)
async def test_negative_answers_are_empty(error: Exception) -> None:
    resolver = MagicMock()
    resolver.resolve = AsyncMock(side_effect=error)

    values = await DnsRecordsAdapter._resolve_record(resolver, "example.invalid", "A")

    assert values == []


@pytest.mark.asyncio
async def test_answer_values_are_text() -> None:
    resolver = MagicMock()
    resolver.resolve = AsyncMock(return_value=["10 mx1.example.com.", "20 mx2.example.com."])

    values = await DnsRecordsAdapter._resolve_record(resolver, "example.com", "MX")

    assert values == ["10 mx1.example.com.", "20 mx2.example.com."]
    resolver.resolve.assert_awaited_once_with("example.com", "MX")
