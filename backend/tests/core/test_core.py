"""
Tests for input validation and the structured log formatter.
"""

from __future__ import annotations

import logging

import pytest

from domainscope.core.logging import StructuredFormatter, get_logger, source_logger
from domainscope.core.validation import DomainScopeError, InvalidDomainQuery, require_domain


def test_require_domain_strips_whitespace() -> None:
    assert require_domain("  example.com\n") == "example.com"


@pytest.mark.parametrize("domain", [None, "", " \t "])
def test_require_domain_rejects_blank(domain) -> None:
    with pytest.raises(InvalidDomainQuery, match="Missing domain") as exc_info:
        require_domain(domain)

    assert isinstance(exc_info.value, DomainScopeError)
    assert isinstance(exc_info.value, ValueError)


def test_formatter_fills_missing_fields() -> None:
    formatter = StructuredFormatter("%(action)s|%(target)s|%(message)s")
    record = logging.LogRecord("domainscope.test", logging.INFO, __file__, 1, "hello", None, None)

    assert formatter.format(record) == "-|-|hello"


def test_formatter_keeps_extra_fields() -> None:
    formatter = StructuredFormatter("%(action)s|%(target)s|%(message)s")
    record = logging.LogRecord("domainscope.test", logging.INFO, __file__, 1, "done", None, None)
    record.action = "aggregate_done"
    record.target = "example.com"

    assert formatter.format(record) == "aggregate_done|example.com|done"


def test_get_logger_namespacing() -> None:
    assert get_logger("domainscope.engine.aggregator").name == "domainscope.engine.aggregator"
    assert get_logger("scripts.check").name == "domainscope.scripts.check"


def test_formatter_renders_source() -> None:
    formatter = StructuredFormatter("%(source)s|%(message)s")
    record = logging.LogRecord("domainscope.test", logging.INFO, __file__, 1, "hi", None, None)

    assert formatter.format(record) == "-|hi"


def test_source_logger_merges_extra(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="domainscope")
    log = source_logger(get_logger("domainscope.tests"), "geolocation")

    log.info("looked up", extra={"action": "adapter_done", "target": "192.0.2.1"})

    record = caplog.records[-1]
    assert record.source == "geolocation"
    assert record.action == "adapter_done"
    assert record.target == "192.0.2.1"
