"""Configuration models."""

from typing import List, Literal, Optional

import pendulum
from pydantic import BaseModel, Field, field_validator


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("eiim", description="Database name")
    user: str = Field("eiim_user", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")
    min_size: int = Field(1, description="Minimum pooled connections", ge=1)
    max_size: int = Field(20, description="Maximum pooled connections", ge=1)


class RedisConfig(BaseModel):
    """Redis cache configuration. Leave url empty to run without a cache."""

    url: Optional[str] = Field("redis://localhost:6379/0", description="Redis URL")
    url_env: Optional[str] = Field(None, description="Environment variable for the Redis URL")


class LLMConfig(BaseModel):
    """Summarization endpoint configuration."""

    provider: str = Field("openrouter", description="LLM provider (openrouter, mock)")
    base_url: str = Field("https://openrouter.ai/api/v1", description="Chat completions base URL")
    api_key_env: Optional[str] = Field("OPENROUTER_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    summarization_model: str = Field("anthropic/claude-3-haiku", description="Model for article summaries")
    analysis_model: str = Field("anthropic/claude-3-haiku", description="Model for briefs and trend analysis")
    requests_per_minute: int = Field(20, description="Request budget per 60 second window", ge=1)
    timeout: float = Field(30.0, description="Request timeout in seconds", gt=0)
    http_referer: Optional[str] = Field("https://eiim.app", description="Attribution referer header")
    app_title: Optional[str] = Field("Environmental Impact Investing Monitor", description="Attribution title header")


class ScheduleConfig(BaseModel):
    """Job cadence for the scheduler."""

    news_interval_minutes: int = Field(60, ge=1, le=1440)
    price_interval_minutes: int = Field(15, ge=1, le=1440)
    brief_hour: int = Field(7, ge=0, le=23)
    metrics_hour: int = Field(8, ge=0, le=23)
    run_on_start: bool = Field(True, description="Run news and prices once before scheduling")
    poll_seconds: float = Field(30.0, description="Scheduler wake-up interval", gt=0)


class NewsConfig(BaseModel):
    """News collection configuration."""

    max_entries_per_feed: int = Field(10, ge=1, le=100)
    timeout: float = Field(10.0, gt=0)
    user_agent: str = Field("EIIM/1.0 (+https://eiim.app)")
    reputable_sources: List[str] = Field(
        default_factory=lambda: ["Environmental Finance", "Carbon Pulse", "Bloomberg Green"],
        description="Sources that receive the reputation bonus",
    )


class MarketSourceConfig(BaseModel):
    """A carbon market price source."""

    name: str = Field(..., description="Display name")
    market: str = Field(..., description="Market code")
    type: Literal["scrape", "api"] = Field("scrape", description="Retrieval type")
    url: str = Field(..., description="Page or endpoint URL")
    selector: Optional[str] = Field(None, description="CSS selector holding the price text")
    currency: str = Field(..., description="ISO currency code")


class MarketBaseline(BaseModel):
    """Simulation baseline for a market."""

    market: str
    base_price: float = Field(..., gt=0)
    currency: str
    volatility: float = Field(..., ge=0, le=1)
    drift: float = Field(0.0, description="Fixed per-run trend term")


def _default_market_sources() -> List[MarketSourceConfig]:
    return [
        MarketSourceConfig(
            name="EU ETS",
            market="eu_ets",
            url="https://www.eex.com/en/market-data/environmental-markets/spot-market",
            selector=".market-data-table",
            currency="EUR",
        ),
        MarketSourceConfig(
            name="California Cap-and-Trade",
            market="california",
            url="https://ww2.arb.ca.gov/our-work/programs/cap-and-trade-program/auction-information",
            currency="USD",
        ),
        MarketSourceConfig(
            name="RGGI",
            market="rggi",
            url="https://www.rggi.org/auctions/auction-results",
            currency="USD",
        ),
        MarketSourceConfig(
            name="UK ETS",
            market="uk_ets",
            url="https://www.gov.uk/government/publications/uk-ets-auction-results",
            currency="GBP",
        ),
    ]


def _default_baselines() -> List[MarketBaseline]:
    return [
        MarketBaseline(market="eu_ets", base_price=85.50, currency="EUR", volatility=0.03, drift=0.001),
        MarketBaseline(market="california", base_price=28.15, currency="USD", volatility=0.02, drift=0.0005),
        MarketBaseline(market="rggi", base_price=13.45, currency="USD", volatility=0.04, drift=0.0015),
        MarketBaseline(market="uk_ets", base_price=72.30, currency="GBP", volatility=0.035, drift=0.0008),
    ]


class PricesConfig(BaseModel):
    """Carbon price collection configuration."""

    sources: List[MarketSourceConfig] = Field(default_factory=_default_market_sources)
    baselines: List[MarketBaseline] = Field(default_factory=_default_baselines)
    dedup_window_minutes: int = Field(5, ge=1)
    scrape_timeout: float = Field(15.0, gt=0)
    cache_ttl_seconds: int = Field(86400, ge=1)

    @field_validator("baselines")
    @classmethod
    def validate_unique_markets(cls, v: List[MarketBaseline]) -> List[MarketBaseline]:
        """Each market may have one baseline."""
        markets = [b.market for b in v]
        if len(markets) != len(set(markets)):
            raise ValueError(f"Duplicate market baselines: {markets}")
        return v


class RetryConfig(BaseModel):
    """Retry policy for scrape sources."""

    max_attempts: int = Field(3, ge=1, le=10)
    base_delay: float = Field(5.0, ge=0, description="Delay multiplied by the attempt number")


class MetricsConfig(BaseModel):
    """Ecosystem metrics configuration."""

    fallback_ttl_seconds: int = Field(7 * 86400, ge=1)
    fetch_timeout: float = Field(10.0, gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO")
    file: Optional[str] = Field(None, description="Optional rotating log file")
    max_bytes: int = Field(10 * 1024 * 1024)
    backup_count: int = Field(5)


class ConfigModel(BaseModel):
    """Main configuration model."""

    timezone: str = Field("UTC", description="Timezone for schedules and reporting periods")
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    news: NewsConfig = Field(default_factory=NewsConfig)
    prices: PricesConfig = Field(default_factory=PricesConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject unknown timezone names early."""
        try:
            pendulum.timezone(v)
        except Exception as e:
            raise ValueError(f"Unknown timezone '{v}': {e}")
        return v


class SourceConfig(BaseModel):
    """Feed source configuration from sources.yaml."""

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="Feed URL")
    source_type: str = Field("rss", description="Source type")
    enabled: bool = Field(True, description="Whether source is polled")
