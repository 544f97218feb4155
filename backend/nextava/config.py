"""Runtime configuration for the availability backend.

Settings are resolved once (environment variables, optionally from a ``.env``
file) and passed explicitly to the services that need them.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

DEFAULT_CSV_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vQKBoPih3bSOhHQH42lkPiG4hSQ6BpFerB-afEeIwlIej2f-Rk7WzV019hqzsV1f0IJhgWmlfZLj68u"
    "/pub?gid=241242125&single=true&output=csv"
)
DEFAULT_CACHE_KEY = "nextava_widget_cache"
DEFAULT_CACHE_TTL_SECONDS = 5 * 60
DEFAULT_KEY_COLUMN = "clinicid"

# Column code -> display label, in display order.
DEFAULT_MODALITIES: dict[str, str] = {
    "XRAY_AVA": "X-Ray",
    "US_AVA": "Ultrasound",
    "VUS_AVA": "Vascular Ultrasound",
    "BMD_AVA": "Bone Density Scan",
    "MAMMO_AVA": "Mammogram",
}

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    """Feed, cache and resolution settings."""

    csv_url: str = DEFAULT_CSV_URL
    cache_key: str = DEFAULT_CACHE_KEY
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    key_column: str = DEFAULT_KEY_COLUMN
    modalities: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MODALITIES))
    notes_field: str = "NOTES_AVA"
    timestamp_field: str = "AVA_TIMESTAMP"
    memory_tier: bool = True
    coalesce_refresh: bool = True
    fetch_timeout: float = 15.0
    redis_url: str | None = None

    @property
    def cache_ttl_ms(self) -> int:
        return self.cache_ttl_seconds * 1000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment (and ``.env``)."""
        load_dotenv()
        return cls(
            csv_url=os.getenv("NEXTAVA_CSV_URL", DEFAULT_CSV_URL),
            cache_key=os.getenv("NEXTAVA_CACHE_KEY", DEFAULT_CACHE_KEY),
            cache_ttl_seconds=int(
                os.getenv("NEXTAVA_CACHE_TTL_SECONDS", str(DEFAULT_CACHE_TTL_SECONDS))
            ),
            key_column=os.getenv("NEXTAVA_KEY_COLUMN", DEFAULT_KEY_COLUMN),
            memory_tier=_env_bool("NEXTAVA_MEMORY_TIER", True),
            coalesce_refresh=_env_bool("NEXTAVA_COALESCE_REFRESH", True),
            fetch_timeout=float(os.getenv("NEXTAVA_FETCH_TIMEOUT", "15.0")),
            redis_url=os.getenv("REDIS_URL") or None,
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
