"""API routes for NextAva availability.

The widget embedded on clinic websites calls the availability endpoint once
per page load. Responses always carry a ``state`` the widget renders
directly:

- ready: at least one modality has availability
- empty: clinic found, nothing to show
- not_found: no such clinic (or the sheet lost its key column)
- error: the feed could not be loaded
"""

import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from nextava.config import get_settings
from nextava.models import (
    AppError,
    ClinicAvailability,
    ErrorCode,
    FetchFailed,
    WidgetState,
)
from nextava.services import (
    AvailabilityPipeline,
    FeedSource,
    FreshnessCache,
    HttpFeedSource,
    KeyValueStore,
    create_store,
)

logger = logging.getLogger(__name__)

router = APIRouter()

UNABLE_TO_LOAD = "Unable to load availability information. Please try again later."
STATE_MESSAGES = {
    WidgetState.NOT_FOUND: "Clinic information not available.",
    WidgetState.EMPTY: "No availability information available at this time.",
    WidgetState.ERROR: UNABLE_TO_LOAD,
}


# Request/Response models
class AvailabilityResponse(BaseModel):
    """Response model for a clinic availability lookup."""
    success: bool
    state: WidgetState
    clinic: Optional[ClinicAvailability] = None
    user_message: Optional[str] = None
    error: Optional[AppError] = None


class InvalidateResponse(BaseModel):
    """Response model for cache invalidation."""
    success: bool
    invalidated: bool = False
    error: Optional[AppError] = None


# Service instances
_store: KeyValueStore | None = None
_source: FeedSource | None = None
_pipeline: AvailabilityPipeline | None = None


def get_pipeline() -> AvailabilityPipeline:
    global _store, _source, _pipeline
    if _pipeline is None:
        settings = get_settings()
        _store = create_store(settings.redis_url)
        _source = HttpFeedSource(settings.csv_url, timeout=settings.fetch_timeout)
        _pipeline = AvailabilityPipeline(FreshnessCache(_store, _source, settings), settings)
    return _pipeline


async def close_services() -> None:
    """Close network clients created by ``get_pipeline``."""
    global _store, _source, _pipeline
    if _source is not None:
        await _source.close()
    if _store is not None:
        await _store.close()
    _store = _source = _pipeline = None


def _error_response(code: ErrorCode, message: str) -> AvailabilityResponse:
    return AvailabilityResponse(
        success=False,
        state=WidgetState.ERROR,
        user_message=UNABLE_TO_LOAD,
        error=AppError(code=code, message=message, user_message=UNABLE_TO_LOAD),
    )


@router.get("/clinics/{clinic_id}/availability", response_model=AvailabilityResponse)
async def get_clinic_availability(
    clinic_id: str, show_updated: bool = False
) -> AvailabilityResponse:
    """Current availability for one clinic.

    Uses the cached feed when it is younger than the TTL.
    The relative "updated" label is only included with ``show_updated=true``.
    """
    clinic_id = clinic_id.strip()
    if not clinic_id:
        return AvailabilityResponse(
            success=False,
            state=WidgetState.ERROR,
            error=AppError(
                code=ErrorCode.VALIDATION_ERROR,
                message="clinic_id is required",
                user_message="Clinic ID is required.",
            ),
        )

    try:
        clinic = await get_pipeline().load(clinic_id)
    except FetchFailed as e:
        logger.warning(f"[API] {clinic_id}: feed unavailable: {e}")
        return _error_response(ErrorCode.FETCH_FAILED, str(e))
    except Exception as e:
        logger.exception(f"[API] {clinic_id}: unexpected error")
        return _error_response(ErrorCode.API_ERROR, str(e))

    if not show_updated:
        clinic = clinic.model_copy(update={"updated_label": None})

    state = clinic.state()
    return AvailabilityResponse(
        success=True,
        state=state,
        clinic=clinic,
        user_message=STATE_MESSAGES.get(state),
    )


@router.post("/cache/invalidate", response_model=InvalidateResponse)
async def invalidate_cache() -> InvalidateResponse:
    """Drop the cached feed so the next lookup refetches it."""
    try:
        invalidated = await get_pipeline().cache.invalidate()
        return InvalidateResponse(success=True, invalidated=invalidated)
    except Exception as e:
        logger.exception("[API] cache invalidation failed")
        return InvalidateResponse(
            success=False,
            error=AppError(
                code=ErrorCode.API_ERROR,
                message=str(e),
                user_message="Failed to clear the cache.",
            ),
        )
