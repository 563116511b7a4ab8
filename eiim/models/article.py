"""Article model for collected news items."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel


class Article(DBModel):
    """News article, identified by its source URL."""

    url: str = Field(..., description="Source URL (unique)")
    title: str = Field(..., description="Article title, plain text")
    content: str = Field("", description="Article body, plain text")
    summary: Optional[str] = Field(None, description="Generated or extractive summary")
    source: str = Field(..., description="Name of the feed source")
    published_date: Optional[datetime] = Field(None, description="Publication timestamp")
    category: str = Field(..., description="Derived category")
    priority_score: int = Field(50, description="Priority score", ge=0, le=100)
