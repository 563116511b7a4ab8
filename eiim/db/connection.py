"""Database connection management."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from .cache import Cache

logger = logging.getLogger(__name__)


def create_connection_pool(config: Dict[str, Any]) -> ConnectionPool:
    """Create a connection pool handing out dict-row connections.

    config is the dict from Config.get_db_config(), password already resolved.
    """
    conninfo = make_conninfo(
        host=config.get("host", "localhost"),
        port=config.get("port", 5432),
        dbname=config.get("database", "eiim"),
        user=config.get("user", "eiim_user"),
        password=config.get("password") or "",
    )
    return ConnectionPool(
        conninfo,
        min_size=config.get("min_size", 1),
        max_size=config.get("max_size", 20),
        kwargs={"row_factory": dict_row},
        open=True,
    )


class Gateway:
    """Shared access to the relational pool and the key/value cache."""

    def __init__(self, pool: ConnectionPool, cache: Optional[Cache] = None) -> None:
        self.pool = pool
        self.cache = cache or Cache(None)

    @classmethod
    def connect(cls, db_config: Dict[str, Any], redis_url: Optional[str] = None) -> "Gateway":
        """Open the pool and the cache client."""
        pool = create_connection_pool(db_config)
        cache = Cache.from_url(redis_url)
        logger.info("Connected to Postgres at %s:%s", db_config.get("host"), db_config.get("port"))
        return cls(pool, cache)

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection, None, None]:
        """Check a connection out of the pool; commits on clean exit."""
        with self.pool.connection() as conn:
            yield conn

    def close(self) -> None:
        """Close the pool and the cache client."""
        self.pool.close()
        self.cache.close()
        logger.info("Connections closed")
