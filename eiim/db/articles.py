"""Article storage and deduplication."""

from datetime import date
from typing import List, Optional

from ..models import Article
from .connection import Gateway


class ArticleStore:
    """Read and write news articles. Articles are insert-only."""

    def __init__(self, gateway: Gateway) -> None:
        """Initialize article storage."""
        self.gateway = gateway

    def exists(self, url: str) -> bool:
        """Check whether an article with this URL is already stored."""
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT id FROM news_articles WHERE url = %s", (url,))
                return cur.fetchone() is not None

    def insert(self, article: Article) -> Optional[int]:
        """
        Insert a new article.

        Returns:
            The new row id, or None when the URL already exists
        """
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO news_articles (
                        title, content, summary, source, url,
                        published_date, category, priority_score
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    ON CONFLICT (url) DO NOTHING
                    RETURNING id
                    """,
                    (
                        article.title,
                        article.content,
                        article.summary,
                        article.source,
                        article.url,
                        article.published_date,
                        article.category,
                        article.priority_score,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        return row["id"] if row else None

    def for_brief(self, brief_date: date, limit: int = 20) -> List[Article]:
        """
        Summarized articles published within 24 hours either side of a date.

        Ordered by priority, then recency.
        """
        with self.gateway.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id, title, content, summary, source, url,
                           published_date, category, priority_score, created_at
                    FROM news_articles
                    WHERE published_date >= %s::date - INTERVAL '24 hours'
                      AND published_date < %s::date + INTERVAL '24 hours'
                      AND summary IS NOT NULL
                    ORDER BY priority_score DESC, published_date DESC
                    LIMIT %s
                    """,
                    (brief_date, brief_date, limit),
                )
                return [Article(**row) for row in cur.fetchall()]

