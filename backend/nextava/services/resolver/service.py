"""Record resolution over header-indexed rows.

The key column is located case-insensitively (after trimming); key values
are compared exactly after trimming the stored cell. The first matching row
wins.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from nextava.models import AvailabilityItem, RawTable, Record, ResolutionMiss

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    """Result of a record lookup.

    ``record`` is None on any miss; ``miss`` then tells the reasons apart.
    """
    record: Optional[Record] = None
    miss: Optional[ResolutionMiss] = None

    @property
    def found(self) -> bool:
        return self.record is not None


def find_column(header: list[str], column_name: str) -> int:
    """Index of ``column_name`` in ``header``, ignoring case and padding.

    Returns:
        The first matching index, or -1.
    """
    wanted = column_name.strip().lower()
    for index, cell in enumerate(header):
        if cell and cell.strip().lower() == wanted:
            return index
    return -1


def build_record(header: list[str], row: list[str]) -> Record:
    """Zip header names with a row; missing cells become ''."""
    return {name: (row[index] if index < len(row) else "") for index, name in enumerate(header)}


def resolve(table: RawTable, key_column: str, key_value: str) -> Resolution:
    """Find the first data row whose key cell equals ``key_value``.

    Args:
        table: Tokenized feed, header row first.
        key_column: Header name of the key column (case-insensitive).
        key_value: Exact value to match against the trimmed key cell.

    Returns:
        A Resolution with the record, or with the reason it is absent.
    """
    if len(table) < 2:
        return Resolution(miss=ResolutionMiss.NO_DATA)

    header = table[0]
    column = find_column(header, key_column)
    if column == -1:
        logger.error(f"[RESOLVE] {key_column!r} column not found in spreadsheet")
        return Resolution(miss=ResolutionMiss.SCHEMA_MISSING)

    for row in table[1:]:
        if column < len(row) and row[column] and row[column].strip() == key_value:
            return Resolution(record=build_record(header, row))

    logger.info(f"[RESOLVE] No row with {key_column}={key_value!r}")
    return Resolution(miss=ResolutionMiss.KEY_NOT_FOUND)


def find_record(table: RawTable, key_column: str, key_value: str) -> Optional[Record]:
    """Like ``resolve`` but returns only the record (or None)."""
    return resolve(table, key_column, key_value).record


def extract_availabilities(record: Record, modalities: dict[str, str]) -> list[AvailabilityItem]:
    """List modalities with a non-blank value, in ``modalities`` order."""
    items: list[AvailabilityItem] = []
    for code, label in modalities.items():
        value = record.get(code, "").strip()
        if value:
            items.append(AvailabilityItem(code=code, label=label, raw_value=value))
    return items


def extract_notes(record: Record, field: str = "NOTES_AVA") -> Optional[str]:
    """Trimmed free-text note, or None when blank."""
    notes = record.get(field, "").strip()
    return notes or None
