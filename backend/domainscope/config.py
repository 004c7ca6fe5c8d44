"""
DomainScope application configuration.

Loads settings from environment variables with sensible defaults for local
development.  Uses Pydantic BaseSettings so every value can be overridden via
an environment variable or a ``.env`` file placed next to the backend root.

The RDAP routing table (TLD -> registry base URL) is process-wide, read-only
data.  It is built once from :data:`DEFAULT_RDAP_ROUTES` plus any
``RDAP_ROUTES`` overrides and handed out as an immutable mapping.
"""

from __future__ import annotations

from functools import lru_cache
from types import MappingProxyType
from typing import Annotated, Mapping, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# ── RDAP routing table ──────────────────────────────────────────────────────
# Exact TLD match; anything not listed goes to ``RDAP_FALLBACK_URL``.

DEFAULT_RDAP_ROUTES: dict[str, str] = {
    "com": "https://rdap.verisign.com/com/v1/",
    "net": "https://rdap.verisign.com/net/v1/",
    "org": "https://rdap.publicinterestregistry.org/rdap/",
    "info": "https://rdap.identitydigital.services/rdap/",
    "io": "https://rdap.identitydigital.services/rdap/",
    "ai": "https://rdap.identitydigital.services/rdap/",
    "me": "https://rdap.identitydigital.services/rdap/",
    "biz": "https://rdap.nic.biz/",
    "xyz": "https://rdap.centralnic.com/xyz/",
    "online": "https://rdap.centralnic.com/online/",
    "site": "https://rdap.centralnic.com/site/",
    "dev": "https://pubapi.registry.google/rdap/",
    "app": "https://pubapi.registry.google/rdap/",
    "page": "https://pubapi.registry.google/rdap/",
    "uk": "https://rdap.nominet.uk/uk/",
    "fr": "https://rdap.nic.fr/",
    "nl": "https://rdap.sidn.nl/",
    "br": "https://rdap.registro.br/",
}


class Settings(BaseSettings):
    """Central configuration for the DomainScope backend.

    All attributes can be overridden through environment variables of the same
    name (case-insensitive).  For example, set ``SITE_TIMEOUT`` in the shell or
    in a ``.env`` file to change how long the website probe may take.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ─────────────────────────────────────────────────────────
    APP_NAME: str = "DomainScope"
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = False

    # ── CORS ────────────────────────────────────────────────────────────────
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    # ── Per-source timeouts (seconds) ───────────────────────────────────────
    REGISTRATION_TIMEOUT: float = 8.0
    DNS_TIMEOUT: float = 5.0
    GEOLOCATION_TIMEOUT: float = 6.0
    CERTIFICATE_TIMEOUT: float = 6.0
    SITE_TIMEOUT: float = 8.0

    # ── Registration data ───────────────────────────────────────────────────
    RDAP_FALLBACK_URL: str = "https://rdap.org/"
    RDAP_ROUTES: dict[str, str] = {}
    WHOIS_FALLBACK_ENABLED: bool = True

    # ── IP geolocation ──────────────────────────────────────────────────────
    IPINFO_URL: str = "https://ipinfo.io"
    IPINFO_TOKEN: Optional[str] = None

    # ── DNS ─────────────────────────────────────────────────────────────────
    DNS_NAMESERVERS: Annotated[list[str], NoDecode] = []

    # ── Validators ──────────────────────────────────────────────────────────

    @field_validator("CORS_ORIGINS", "DNS_NAMESERVERS", mode="before")
    @classmethod
    def parse_comma_list(cls, value: object) -> list[str]:
        """Accept a comma-separated string *or* an actual list."""
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return list(value)  # type: ignore[arg-type]

    @field_validator("RDAP_ROUTES", mode="after")
    @classmethod
    def normalise_routes(cls, value: dict[str, str]) -> dict[str, str]:
        """Lower-case TLD keys and make sure every base URL ends in ``/``."""
        return {
            tld.lower().lstrip("."): url if url.endswith("/") else f"{url}/"
            for tld, url in value.items()
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton of the application settings.

    Using ``lru_cache`` ensures the ``.env`` file is read only once and the
    same ``Settings`` instance is reused across the entire process.
    """
    return Settings()


@lru_cache(maxsize=1)
def get_rdap_routes() -> Mapping[str, str]:
    """Return the immutable TLD -> RDAP base URL routing table."""
    routes = dict(DEFAULT_RDAP_ROUTES)
    routes.update(get_settings().RDAP_ROUTES)
    return MappingProxyType(routes)
