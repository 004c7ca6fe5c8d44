"""
Correlation Engine for DomainScope.

Cross-references the normalised signals of a finished
:class:`~domainscope.models.report.DomainReport` to surface anomalies as
short human-readable alerts.

The engine is pure: it reads the report, never mutates it, and given the
same report and reference time always returns the same alerts in the same
order.  Checks run in a fixed order and never short-circuit each other.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from typing import Optional

from domainscope.models.report import OTHER_PROVIDER, DomainReport

# Registrations expiring in fewer days than this raise an alert.
EXPIRY_ALERT_DAYS: int = 30

# Certificates expiring in fewer days than this raise an alert.
CERT_EXPIRY_ALERT_DAYS: int = 30

_SECONDS_PER_DAY: float = 86_400.0


def days_until(expiry: date, now: datetime) -> int:
    """Whole days from *now* until midnight UTC of *expiry*, rounded up.

    Already-expired dates give zero or a negative count.
    """
    deadline = datetime.combine(expiry, time.min, tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return math.ceil((deadline - now).total_seconds() / _SECONDS_PER_DAY)


class CorrelationEngine:
    """Rule-based correlation over one domain report.

    Rules, in evaluation (and therefore output) order:

    1. registration expiry within :data:`EXPIRY_ALERT_DAYS`;
    2. registrar / hosting provider mismatch, one alert per IP;
    3. TLS certificate expiry within :data:`CERT_EXPIRY_ALERT_DAYS`.
    """

    def analyze(
        self, report: DomainReport, now: Optional[datetime] = None
    ) -> list[str]:
        """Run every check and return the combined alert list.

        Args:
            report: A well-formed report; absent sources are fine.
            now:    Reference time, defaults to the current UTC time.

        Returns:
            Alert strings (may be empty).
        """
        if now is None:
            now = datetime.now(timezone.utc)

        alerts: list[str] = []
        alerts += self._check_registration_expiry(report, now)
        alerts += self._check_provider_mismatch(report)
        alerts += self._check_certificate_expiry(report, now)
        return alerts

    # -- Individual checks ----------------------------------------------------

    @staticmethod
    def _check_registration_expiry(report: DomainReport, now: datetime) -> list[str]:
        expires = report.registration.expires
        if not expires.parsed:
            return []
        days = days_until(expires.value, now)
        if days < EXPIRY_ALERT_DAYS:
            return [f"Domain expires soon ({days} days)"]
        return []

    @staticmethod
    def _check_provider_mismatch(report: DomainReport) -> list[str]:
        """Flag IPs hosted by a known provider the registrar does not name.

        The canonical provider label, exactly as classified, must occur in
        the upper-cased registrar text.  Mixed-case labels such as
        "Cloudflare" therefore never match and always alert.  An unknown
        registrar suppresses the check.
        """
        registration = report.registration
        if not registration.registrar_known:
            return []

        registrar_upper = registration.registrar.upper()
        alerts: list[str] = []
        for network in report.ip_networks:
            if network.provider == OTHER_PROVIDER:
                continue
            if network.provider not in registrar_upper:
                alerts.append(
                    f"Domain registered with {registration.registrar} "
                    f"but IP {network.ip} belongs to {network.provider}"
                )
        return alerts

    @staticmethod
    def _check_certificate_expiry(report: DomainReport, now: datetime) -> list[str]:
        certificate = report.certificate
        if certificate is None or certificate.valid_to is None:
            return []
        days = days_until(certificate.valid_to, now)
        if days < CERT_EXPIRY_ALERT_DAYS:
            return [f"TLS certificate expires soon ({days} days)"]
        return []


def correlate(report: DomainReport, now: Optional[datetime] = None) -> list[str]:
    """Module-level shorthand for :meth:`CorrelationEngine.analyze`."""
    return CorrelationEngine().analyze(report, now=now)
