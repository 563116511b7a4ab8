"""Daily brief model."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from .base import DBModel

FALLBACK_MODEL = "fallback"


class DailyBrief(DBModel):
    """Aggregate narrative for one calendar date."""

    brief_date: date = Field(..., description="Date the brief covers (unique)")
    content: str = Field(..., description="Brief prose, markdown")
    article_count: int = Field(..., description="Articles the brief was built from", ge=0)
    top_categories: List[str] = Field(default_factory=list, description="Up to five categories", max_length=5)
    ai_model_used: str = Field(FALLBACK_MODEL, description="Model id, or 'fallback'")
    generated_at: Optional[datetime] = Field(None, description="Generation timestamp")

    @property
    def is_fallback(self) -> bool:
        return self.ai_model_used == FALLBACK_MODEL
