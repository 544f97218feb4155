"""Freshness cache module."""

from .service import FreshnessCache, now_ms

__all__ = ["FreshnessCache", "now_ms"]
