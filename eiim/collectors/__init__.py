"""News, price and metric collectors."""

from .analysis import PriceStatistics, price_statistics
from .indicators import ROSTER, GeneratorContext, Indicator
from .metrics import MetricsCollector
from .models import CollectionResult, MetricsResult, TrendReport
from .news import NewsCollector
from .periods import reporting_period
from .prices import PriceCollector, extract_price
from .retry import RetryPolicy

__all__ = [
    "CollectionResult",
    "GeneratorContext",
    "Indicator",
    "MetricsCollector",
    "MetricsResult",
    "NewsCollector",
    "PriceCollector",
    "PriceStatistics",
    "ROSTER",
    "RetryPolicy",
    "TrendReport",
    "extract_price",
    "price_statistics",
    "reporting_period",
]
