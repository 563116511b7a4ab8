"""Feed source registry in database."""

from typing import Dict, List

from ..config import SourceConfig
from ..models import DataSource
from .connection import Gateway


class SourceStore:
    """Manage the data_sources registry."""

    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    def active_feeds(self) -> List[DataSource]:
        """Active rss sources in declaration order."""
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT * FROM data_sources
                    WHERE is_active = TRUE AND source_type = 'rss'
                    ORDER BY id
                    """
                )
                return [DataSource(**row) for row in cur.fetchall()]

    def list_all(self) -> List[DataSource]:
        """Get all sources."""
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT * FROM data_sources ORDER BY id")
                return [DataSource(**row) for row in cur.fetchall()]

    def mark_success(self, source_id: int) -> None:
        """Record a successful poll."""
        with self.gateway.connection() as conn:
            conn.execute(
                """
                UPDATE data_sources
                SET last_scraped = NOW(), error_count = 0
                WHERE id = %s
                """,
                (source_id,),
            )
            conn.commit()

    def mark_failure(self, source_id: int) -> None:
        """Record a failed poll."""
        with self.gateway.connection() as conn:
            conn.execute(
                "UPDATE data_sources SET error_count = error_count + 1 WHERE id = %s",
                (source_id,),
            )
            conn.commit()

    def set_active(self, name: str, active: bool) -> bool:
        """Enable or disable a source by name. Returns False if not found."""
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "UPDATE data_sources SET is_active = %s WHERE name = %s RETURNING id",
                    (active, name),
                )
                found = cur.fetchone() is not None
            conn.commit()
        return found

    def sync_sources(self, sources: List[SourceConfig]) -> Dict[str, int]:
        """
        Sync sources from config to database.

        Returns:
            Mapping of source name to database ID
        """
        source_map = {}

        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                for source in sources:
                    cur.execute(
                        """
                        INSERT INTO data_sources (name, url, source_type, is_active)
                        VALUES (%s, %s, %s, %s)
                        ON CONFLICT (name) DO UPDATE SET
                            url = EXCLUDED.url,
                            source_type = EXCLUDED.source_type,
                            is_active = EXCLUDED.is_active
                        RETURNING id
                        """,
                        (source.name, source.url, source.source_type, source.enabled),
                    )
                    source_map[source.name] = cur.fetchone()["id"]
            conn.commit()

        return source_map
