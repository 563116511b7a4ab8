"""Carbon price storage."""

from datetime import timedelta
from typing import List, Optional

from ..models import PricePoint
from .connection import Gateway


class PriceStore:
    """Write-once price points with a per-market recency window."""

    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    def store_if_absent(self, point: PricePoint, window: timedelta = timedelta(minutes=5)) -> bool:
        """
        Insert a point unless the market already has one within the window.

        The check and insert run in one transaction under a per-market advisory
        lock.

        Returns:
            True if the point was written
        """
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT pg_advisory_xact_lock(hashtext(%s))", (f"carbon_prices:{point.market}",))
                cur.execute(
                    """
                    SELECT id FROM carbon_prices
                    WHERE market = %s
                      AND timestamp > %s
                      AND timestamp < %s
                    LIMIT 1
                    """,
                    (point.market, point.timestamp - window, point.timestamp + window),
                )
                if cur.fetchone() is not None:
                    return False

                cur.execute(
                    """
                    INSERT INTO carbon_prices (market, price, volume, currency, timestamp, data_source)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (
                        point.market,
                        point.price,
                        point.volume,
                        point.currency,
                        point.timestamp,
                        point.data_source,
                    ),
                )
            conn.commit()
        return True

    def history(self, market: str, days: int = 30, limit: Optional[int] = None) -> List[PricePoint]:
        """Points for a market over the last N days, oldest first."""
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT * FROM (
                        SELECT * FROM carbon_prices
                        WHERE market = %s AND timestamp >= NOW() - make_interval(days => %s)
                        ORDER BY timestamp DESC
                        LIMIT %s
                    ) recent
                    ORDER BY timestamp ASC
                    """,
                    (market, days, limit),
                )
                return [PricePoint(**row) for row in cur.fetchall()]

    def latest(self) -> List[PricePoint]:
        """Most recent point per market."""
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT DISTINCT ON (market) *
                    FROM carbon_prices
                    ORDER BY market, timestamp DESC
                    """
                )
                return [PricePoint(**row) for row in cur.fetchall()]
