"""Data models for EIIM."""

from .article import Article
from .brief import FALLBACK_MODEL, DailyBrief
from .metric import MetricRecord, MetricValue, NumericValue, StructuredValue, to_metric_value
from .price import SIMULATED_SOURCE, PricePoint
from .source import DataSource

__all__ = [
    "Article",
    "DailyBrief",
    "DataSource",
    "FALLBACK_MODEL",
    "MetricRecord",
    "MetricValue",
    "NumericValue",
    "PricePoint",
    "SIMULATED_SOURCE",
    "StructuredValue",
    "to_metric_value",
]
