"""Core data models for NextAva availability.

This module contains the Pydantic models shared by the cache, the resolver
and the API layer: the persisted cache envelope, derived availability items
and the presentation payload for one clinic.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

# Rows of string cells, header row first.
RawTable = list[list[str]]

# One resolved data row keyed by header name.
Record = dict[str, str]


class CacheSource(str, Enum):
    """Where a table returned by the freshness cache came from."""

    MEMORY = "memory"
    STORE = "store"
    NETWORK = "network"


class ResolutionMiss(str, Enum):
    """Why a record lookup came back empty.

    All three reasons surface to callers as an absent record; the value is
    diagnostic only.
    """

    NO_DATA = "no_data"
    SCHEMA_MISSING = "schema_missing"
    KEY_NOT_FOUND = "key_not_found"


class WidgetState(str, Enum):
    """Display states handed to the rendering layer."""

    ERROR = "error"
    NOT_FOUND = "not_found"
    EMPTY = "empty"
    READY = "ready"


class CacheEnvelope(BaseModel):
    """Timestamped snapshot of a tokenized feed as persisted in the store.

    ``timestamp`` is integer milliseconds since the Unix epoch.
    """

    data: list[list[str]] = Field(..., description="Tokenized CSV rows")
    timestamp: int = Field(..., ge=0, description="Capture time in epoch ms")

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp

    def is_fresh(self, now_ms: int, ttl_ms: int) -> bool:
        """Whether the envelope may still be served at ``now_ms``."""
        return self.age_ms(now_ms) < ttl_ms


class CachedTable(BaseModel):
    """Table returned by the freshness cache along with its capture time."""

    data: list[list[str]]
    timestamp: int
    source: CacheSource = CacheSource.NETWORK


class AvailabilityItem(BaseModel):
    """One modality with a non-empty availability value."""

    code: str = Field(..., description="Modality column name, e.g. XRAY_AVA")
    label: str = Field(..., description="Human label, e.g. X-Ray")
    raw_value: str = Field(..., description="Trimmed cell value")


class ClinicAvailability(BaseModel):
    """Normalized, time-aware view of one clinic for display.

    ``record`` is None when the clinic could not be resolved; ``miss`` then
    says why.
    """

    clinic_id: str
    record: Optional[dict[str, str]] = None
    miss: Optional[ResolutionMiss] = None
    availabilities: list[AvailabilityItem] = Field(default_factory=list)
    notes: Optional[str] = None
    last_updated_raw: Optional[str] = Field(
        None, description="Raw AVA_TIMESTAMP cell value"
    )
    updated_label: Optional[str] = Field(
        None, description="Relative label such as 'yesterday'"
    )
    cache_timestamp: int = Field(..., description="Feed capture time in epoch ms")
    cache_source: CacheSource = CacheSource.NETWORK

    @property
    def found(self) -> bool:
        return self.record is not None

    def state(self) -> WidgetState:
        """Display state implied by this payload."""
        if self.record is None:
            return WidgetState.NOT_FOUND
        if not self.availabilities:
            return WidgetState.EMPTY
        return WidgetState.READY
