"""Configuration management for EIIM."""

from .loader import Config, load_config, load_sources, save_config, save_sources
from .models import (
    ConfigModel,
    LLMConfig,
    LoggingConfig,
    MarketBaseline,
    MarketSourceConfig,
    NewsConfig,
    PricesConfig,
    RetryConfig,
    ScheduleConfig,
    SourceConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "LLMConfig",
    "LoggingConfig",
    "MarketBaseline",
    "MarketSourceConfig",
    "NewsConfig",
    "PricesConfig",
    "RetryConfig",
    "ScheduleConfig",
    "SourceConfig",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
