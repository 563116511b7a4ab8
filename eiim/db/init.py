"""Database initialization and schema management."""

import logging

from psycopg.errors import DatabaseError

from .connection import Gateway

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
-- Feed registry
CREATE TABLE IF NOT EXISTS data_sources (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    url TEXT NOT NULL,
    source_type TEXT NOT NULL DEFAULT 'rss',
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    last_scraped TIMESTAMPTZ,
    error_count INTEGER NOT NULL DEFAULT 0 CHECK (error_count >= 0),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- News articles
CREATE TABLE IF NOT EXISTS news_articles (
    id SERIAL PRIMARY KEY,
    url TEXT NOT NULL UNIQUE,
    title TEXT NOT NULL,
    content TEXT NOT NULL DEFAULT '',
    summary TEXT,
    source TEXT NOT NULL,
    published_date TIMESTAMPTZ,
    category TEXT NOT NULL,
    priority_score INTEGER NOT NULL DEFAULT 50 CHECK (priority_score >= 0 AND priority_score <= 100),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Carbon prices
CREATE TABLE IF NOT EXISTS carbon_prices (
    id SERIAL PRIMARY KEY,
    market TEXT NOT NULL,
    price NUMERIC(12, 2) NOT NULL CHECK (price >= 0),
    volume BIGINT NOT NULL DEFAULT 0,
    currency TEXT NOT NULL,
    timestamp TIMESTAMPTZ NOT NULL,
    data_source TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Ecosystem metrics, one row per metric per reporting period
CREATE TABLE IF NOT EXISTS ecosystem_metrics (
    id SERIAL PRIMARY KEY,
    metric_name TEXT NOT NULL,
    value_kind TEXT NOT NULL CHECK (value_kind IN ('numeric', 'structured')),
    value JSONB NOT NULL,
    unit TEXT NOT NULL,
    period_start TIMESTAMPTZ NOT NULL,
    period_end TIMESTAMPTZ NOT NULL,
    geography TEXT NOT NULL DEFAULT 'Global',
    data_source TEXT NOT NULL,
    recorded_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    UNIQUE (metric_name, period_start, period_end)
);

-- Daily briefs
CREATE TABLE IF NOT EXISTS daily_briefs (
    id SERIAL PRIMARY KEY,
    brief_date DATE NOT NULL UNIQUE,
    content TEXT NOT NULL,
    article_count INTEGER NOT NULL DEFAULT 0,
    top_categories TEXT[] NOT NULL DEFAULT '{}',
    ai_model_used TEXT NOT NULL DEFAULT 'fallback',
    generated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Create indexes
CREATE INDEX IF NOT EXISTS idx_news_articles_published_date ON news_articles(published_date);
CREATE INDEX IF NOT EXISTS idx_news_articles_category ON news_articles(category);
CREATE INDEX IF NOT EXISTS idx_carbon_prices_market_timestamp ON carbon_prices(market, timestamp DESC);
CREATE INDEX IF NOT EXISTS idx_ecosystem_metrics_name ON ecosystem_metrics(metric_name);
CREATE INDEX IF NOT EXISTS idx_data_sources_active ON data_sources(is_active, source_type);
"""


def validate_connection(gateway: Gateway) -> bool:
    """Validate database connection."""
    try:
        with gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 AS ok")
                result = cur.fetchone()
                return result is not None and result["ok"] == 1
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        return False


def init_database(gateway: Gateway) -> None:
    """Initialize database schema."""
    try:
        with gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
            conn.commit()
            logger.info("Database schema initialized successfully")
    except DatabaseError as e:
        logger.error("Failed to initialize database schema: %s", e)
        raise
