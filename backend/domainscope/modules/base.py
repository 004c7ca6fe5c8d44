"""
Base interface for all DomainScope source adapters.

Each adapter wraps exactly one external signal source (registration data,
DNS, IP geolocation, TLS certificate, website) and exposes a single
``fetch`` coroutine.  Adapters are total from the caller's perspective:
every external failure is caught inside the adapter and reported as an
:class:`~domainscope.models.report.Absent` value.

Scheduling (which adapters run concurrently, and that geolocation waits for
DNS) belongs to :class:`~domainscope.engine.aggregator.DomainAggregator`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from domainscope.models.report import Absent


class BaseSourceAdapter(ABC):
    """Abstract base class that every source adapter must implement.

    Attributes:
        name:        Short unique identifier used in the registry and logs.
        description: Human-readable one-liner describing the source.
    """

    name: str = "base"
    description: str = ""

    @abstractmethod
    async def fetch(self, target: str, timeout: float) -> Any:
        """Query the source for *target* and return its normalised result.

        Args:
            target:  Domain name (or, for geolocation, an IP address).
            timeout: Seconds the upstream call may take.

        Returns:
            The adapter's normalised partial result, or :class:`Absent`.
        """

    def absent(self, reason: str) -> Absent:
        """Shorthand for an :class:`Absent` tagged with this adapter's name."""
        return Absent(source=self.name, reason=reason)
