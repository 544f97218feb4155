"""Record resolver module."""

from .service import (
    Resolution,
    build_record,
    extract_availabilities,
    extract_notes,
    find_column,
    find_record,
    resolve,
)

__all__ = [
    "Resolution",
    "build_record",
    "extract_availabilities",
    "extract_notes",
    "find_column",
    "find_record",
    "resolve",
]
