"""Pure helpers: CSV tokenizing, relative time labels, memory cache tier."""

from .cache import EnvelopeMemoryCache
from .csv_tokenizer import serialize_csv, tokenize
from .time_ago import parse_timestamp, time_ago

__all__ = [
    "EnvelopeMemoryCache",
    "serialize_csv",
    "tokenize",
    "parse_timestamp",
    "time_ago",
]
