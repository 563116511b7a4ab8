"""Daily brief storage."""

from datetime import date
from typing import Optional

from ..models import DailyBrief
from .connection import Gateway


class BriefStore:
    """One brief per calendar date."""

    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    def get(self, brief_date: date) -> Optional[DailyBrief]:
        """Get the brief for a date."""
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT * FROM daily_briefs WHERE brief_date = %s", (brief_date,))
                row = cur.fetchone()
        return DailyBrief(**row) if row else None

    def insert(self, brief: DailyBrief) -> DailyBrief:
        """
        Insert a brief; if the date was written concurrently, return that row
        instead.
        """
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO daily_briefs (
                        brief_date, content, article_count, top_categories, ai_model_used, generated_at
                    ) VALUES (%s, %s, %s, %s, %s, COALESCE(%s, NOW()))
                    ON CONFLICT (brief_date) DO NOTHING
                    RETURNING *
                    """,
                    self._params(brief),
                )
                row = cur.fetchone()
                if row is None:
                    cur.execute("SELECT * FROM daily_briefs WHERE brief_date = %s", (brief.brief_date,))
                    row = cur.fetchone()
            conn.commit()
        return DailyBrief(**row)

    def replace(self, brief: DailyBrief) -> DailyBrief:
        """Write a brief, superseding any existing row for the date."""
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO daily_briefs (
                        brief_date, content, article_count, top_categories, ai_model_used, generated_at
                    ) VALUES (%s, %s, %s, %s, %s, COALESCE(%s, NOW()))
                    ON CONFLICT (brief_date) DO UPDATE SET
                        content = EXCLUDED.content,
                        article_count = EXCLUDED.article_count,
                        top_categories = EXCLUDED.top_categories,
                        ai_model_used = EXCLUDED.ai_model_used,
                        generated_at = EXCLUDED.generated_at
                    RETURNING *
                    """,
                    self._params(brief),
                )
                row = cur.fetchone()
            conn.commit()
        return DailyBrief(**row)

    @staticmethod
    def _params(brief: DailyBrief) -> tuple:
        return (
            brief.brief_date,
            brief.content,
            brief.article_count,
            list(brief.top_categories),
            brief.ai_model_used,
            brief.generated_at,
        )
