"""Ecosystem metric storage."""

import json
from typing import List, Tuple

from ..models import MetricRecord
from .connection import Gateway


class MetricStore:
    """Upsert metric values by reporting period."""

    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    def upsert(self, record: MetricRecord) -> Tuple[MetricRecord, bool]:
        """
        Write a metric for its period, replacing value and recorded_at if the
        period already has a row.

        Returns:
            Tuple of (stored record, is_new)
        """
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO ecosystem_metrics (
                        metric_name, value_kind, value, unit,
                        period_start, period_end, geography, data_source, recorded_at
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, NOW())
                    ON CONFLICT (metric_name, period_start, period_end) DO UPDATE SET
                        value_kind = EXCLUDED.value_kind,
                        value = EXCLUDED.value,
                        recorded_at = NOW()
                    RETURNING *, (xmax = 0) AS inserted
                    """,
                    (
                        record.metric_name,
                        record.value.kind,
                        json.dumps(record.value.model_dump()),
                        record.unit,
                        record.period_start,
                        record.period_end,
                        record.geography,
                        record.data_source,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        inserted = row.pop("inserted")
        return MetricRecord(**row), inserted

    def latest(self, limit: int = 50) -> List[MetricRecord]:
        """Most recently recorded metric rows."""
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT * FROM ecosystem_metrics ORDER BY recorded_at DESC LIMIT %s",
                    (limit,),
                )
                return [MetricRecord(**row) for row in cur.fetchall()]
