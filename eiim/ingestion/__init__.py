"""Feed ingestion and text cleaning."""

from .models import FeedItem, FeedResult
from .rss_fetcher import FeedFetcher
from .text import clean_html, extractive_summary

__all__ = [
    "FeedFetcher",
    "FeedItem",
    "FeedResult",
    "clean_html",
    "extractive_summary",
]
