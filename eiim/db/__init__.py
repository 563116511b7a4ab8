"""Persistence gateway for EIIM."""

from .articles import ArticleStore
from .briefs import BriefStore
from .cache import Cache
from .connection import Gateway, create_connection_pool
from .init import init_database, validate_connection
from .metrics import MetricStore
from .prices import PriceStore
from .sources import SourceStore

__all__ = [
    "ArticleStore",
    "BriefStore",
    "Cache",
    "Gateway",
    "MetricStore",
    "PriceStore",
    "SourceStore",
    "create_connection_pool",
    "init_database",
    "validate_connection",
]
