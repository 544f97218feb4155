"""NextAva data models."""

from .core import (
    AvailabilityItem,
    CachedTable,
    CacheEnvelope,
    CacheSource,
    ClinicAvailability,
    RawTable,
    Record,
    ResolutionMiss,
    WidgetState,
)
from .errors import (
    AppError,
    AvailabilityError,
    ErrorCode,
    FetchFailed,
    StoreReadFailed,
    StoreWriteFailed,
)

__all__ = [
    # Core
    "AvailabilityItem",
    "CachedTable",
    "CacheEnvelope",
    "CacheSource",
    "ClinicAvailability",
    "RawTable",
    "Record",
    "ResolutionMiss",
    "WidgetState",
    # Errors
    "AppError",
    "AvailabilityError",
    "ErrorCode",
    "FetchFailed",
    "StoreReadFailed",
    "StoreWriteFailed",
]
