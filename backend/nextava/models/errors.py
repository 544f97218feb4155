"""Error taxonomy for the availability pipeline.

Only ``FetchFailed`` is meant to cross the freshness cache boundary. Store
failures are recovered inside the cache, and resolution misses are reported
as values (see ``ResolutionMiss``), not raised.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Error codes reported to API clients."""

    FETCH_FAILED = "FETCH_FAILED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    API_ERROR = "API_ERROR"


class AppError(BaseModel):
    """Error envelope returned in API responses."""

    code: ErrorCode
    message: str = Field(..., description="Technical message for logs/debugging")
    user_message: str = Field(..., description="Message safe to show end users")


class AvailabilityError(Exception):
    """Base class for pipeline errors."""


class FetchFailed(AvailabilityError):
    """The feed could not be downloaded.

    Raised for transport errors and non-success HTTP statuses.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreReadFailed(AvailabilityError):
    """The persistent store could not be read."""


class StoreWriteFailed(AvailabilityError):
    """The persistent store rejected a write (quota, connection, ...)."""
