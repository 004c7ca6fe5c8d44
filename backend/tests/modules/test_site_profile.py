"""
Tests for the website profile adapter.

Validates technology fingerprinting and security header scoring from a
mocked streamed response, the HTTPS-to-HTTP fallback, the body size bound,
and absence when neither scheme answers or the status is not 2xx.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from domainscope.models.report import Absent, SiteProfile
from domainscope.modules.site_profile import SiteProfileAdapter, _read_head


@asynccontextmanager
async def _streamed(response: httpx.Response):
    yield response


def _mock_client(MockClient: MagicMock, outcomes: list) -> AsyncMock:
    """Each outcome is an exception raised by ``stream()`` or a response it yields."""
    mock_client_instance = AsyncMock()
    mock_client_instance.stream = MagicMock(
        side_effect=[
            outcome if isinstance(outcome, Exception) else _streamed(outcome)
            for outcome in outcomes
        ]
    )
    mock_client_instance.__aenter__ = AsyncMock(return_value=mock_client_instance)
    mock_client_instance.__aexit__ = AsyncMock(return_value=False)
    MockClient.return_value = mock_client_instance
    return mock_client_instance


def _response(url: str, headers: dict[str, str], body: str, status_code: int = 200):
    return httpx.Response(
        status_code,
        headers=headers,
        text=body,
        request=httpx.Request("GET", url),
    )


@pytest.mark.asyncio
async def test_https_profile() -> None:
    response = _response(
        "https://example.com",
        {
            "Server": "nginx",
            "X-Powered-By": "PHP/8.2.12",
            "Strict-Transport-Security": "max-age=31536000",
            "X-Frame-Options": "SAMEORIGIN",
        },
        "<html><head><link href='/wp-content/themes/a/style.css'></head></html>",
    )
    with patch("domainscope.modules.site_profile.httpx.AsyncClient") as MockClient:
        client = _mock_client(MockClient, [response])

        result = await SiteProfileAdapter().fetch("example.com", timeout=5)

    assert isinstance(result, SiteProfile)
    assert result.status == 200
    assert result.server == "nginx"
    assert result.technologies == ["Nginx", "PHP", "WordPress"]
    assert result.https is True
    assert result.hsts is True
    assert result.x_frame_options is True
    assert result.score == 90
    client.stream.assert_called_once_with("GET", "https://example.com")


@pytest.mark.asyncio
async def test_falls_back_to_http() -> None:
    response = _response("http://example.com", {}, "<html>plain</html>")
    with patch("domainscope.modules.site_profile.httpx.AsyncClient") as MockClient:
        client = _mock_client(MockClient, [httpx.ConnectError("tls refused"), response])

        result = await SiteProfileAdapter().fetch("example.com", timeout=5)

    assert isinstance(result, SiteProfile)
    assert result.https is False
    assert result.technologies == ["Unknown"]
    assert result.score == 75
    assert [c.args[1] for c in client.stream.call_args_list] == [
        "https://example.com",
        "http://example.com",
    ]


@pytest.mark.asyncio
async def test_unreachable_site_is_absent() -> None:
    with patch("domainscope.modules.site_profile.httpx.AsyncClient") as MockClient:
        _mock_client(
            MockClient,
            [httpx.TimeoutException("timed out"), httpx.ConnectError("refused")],
        )

        result = await SiteProfileAdapter().fetch("example.com", timeout=5)

    assert result == Absent(source="site", reason="website unreachable")


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [404, 503])
async def test_error_status_is_absent(status_code: int) -> None:
    response = _response(
        "https://example.com",
        {"Server": "nginx"},
        "<html>Service Unavailable</html>",
        status_code=status_code,
    )
    with patch("domainscope.modules.site_profile.httpx.AsyncClient") as MockClient:
        client = _mock_client(MockClient, [response])

        result = await SiteProfileAdapter().fetch("example.com", timeout=5)

    assert result == Absent(source="site", reason=f"website http {status_code}")
    client.stream.assert_called_once_with("GET", "https://example.com")


@pytest.mark.asyncio
async def test_markers_beyond_body_limit_are_ignored() -> None:
    body = "a" * 250_000 + "<link href='/wp-content/themes/a/style.css'>"
    response = _response("https://example.com", {}, body)
    with patch("domainscope.modules.site_profile.httpx.AsyncClient") as MockClient:
        _mock_client(MockClient, [response])

        result = await SiteProfileAdapter().fetch("example.com", timeout=5)

    assert isinstance(result, SiteProfile)
    assert result.technologies == ["Unknown"]


@pytest.mark.asyncio
async def test_read_head_stops_at_limit() -> None:
    response = httpx.Response(
        200,
        headers={"Content-Type": "text/html; charset=utf-8"},
        content=b"0123456789abcdef",
    )

    assert await _read_head(response, 10) == "0123456789"
