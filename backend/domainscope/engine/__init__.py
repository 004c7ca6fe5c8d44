"""DomainScope engine - classification, normalisation and correlation.

The aggregator lives in :mod:`domainscope.engine.aggregator`; it is not
re-exported here because the source adapters import the normaliser from
this package.
"""

from domainscope.engine.correlation import CorrelationEngine, correlate
from domainscope.engine.providers import PROVIDER_LABELS, classify_provider

__all__ = [
    "CorrelationEngine",
    "correlate",
    "PROVIDER_LABELS",
    "classify_provider",
]
