"""Availability pipeline: freshness cache -> resolver -> display payload.

``FetchFailed`` from the cache propagates; callers map it to the generic
"unable to load" state. A clinic that cannot be resolved is not an error:
the payload simply carries no record and the miss reason.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from nextava.config import Settings
from nextava.models import ClinicAvailability
from nextava.services.freshness import FreshnessCache
from nextava.services.resolver import extract_availabilities, extract_notes, resolve
from nextava.utils import time_ago

logger = logging.getLogger(__name__)


class AvailabilityPipeline:
    """Resolves one clinic from the cached feed."""

    def __init__(
        self,
        cache: FreshnessCache,
        settings: Settings,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._cache = cache
        self._settings = settings
        self._now = now

    @property
    def cache(self) -> FreshnessCache:
        return self._cache

    async def load(self, clinic_id: str) -> ClinicAvailability:
        """Build the display payload for ``clinic_id``.

        Raises:
            FetchFailed: If the feed had to be refreshed and could not be.
        """
        table = await self._cache.get_data()
        resolution = resolve(table.data, self._settings.key_column, clinic_id)

        if resolution.record is None:
            return ClinicAvailability(
                clinic_id=clinic_id,
                miss=resolution.miss,
                cache_timestamp=table.timestamp,
                cache_source=table.source,
            )

        record = resolution.record
        raw_timestamp = record.get(self._settings.timestamp_field, "").strip() or None
        reference = self._now() if self._now else None

        payload = ClinicAvailability(
            clinic_id=clinic_id,
            record=record,
            availabilities=extract_availabilities(record, self._settings.modalities),
            notes=extract_notes(record, self._settings.notes_field),
            last_updated_raw=raw_timestamp,
            updated_label=time_ago(raw_timestamp, now=reference),
            cache_timestamp=table.timestamp,
            cache_source=table.source,
        )
        logger.info(
            f"[PIPELINE] {clinic_id}: {len(payload.availabilities)} modalities "
            f"({table.source.value})"
        )
        return payload
