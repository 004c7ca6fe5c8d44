"""
Source Adapter Registry -- import all adapters for auto-registration.

Importing this package causes every concrete adapter class to be loaded
and, through the :func:`@AdapterRegistry.register <AdapterRegistry.register>`
decorator, automatically registered in the central adapter registry.
The aggregator only needs to ``import domainscope.modules`` to have the
full catalogue available.
"""

from domainscope.modules.registry import AdapterRegistry
from domainscope.modules.registration import RegistrationAdapter
from domainscope.modules.dns_records import DnsRecordsAdapter
from domainscope.modules.geolocation import GeolocationAdapter
from domainscope.modules.certificate import CertificateAdapter
from domainscope.modules.site_profile import SiteProfileAdapter

__all__: list[str] = [
    "AdapterRegistry",
    "RegistrationAdapter",
    "DnsRecordsAdapter",
    "GeolocationAdapter",
    "CertificateAdapter",
    "SiteProfileAdapter",
]
