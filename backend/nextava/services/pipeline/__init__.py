"""Availability pipeline module."""

from .service import AvailabilityPipeline

__all__ = ["AvailabilityPipeline"]
