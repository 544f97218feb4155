"""Feed source module."""

from .service import FeedSource, HttpFeedSource

__all__ = ["FeedSource", "HttpFeedSource"]
