"""Data source model for the feed registry."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel


class DataSource(DBModel):
    """Registered feed source."""

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="Feed URL")
    source_type: str = Field("rss", description="Source type; only rss is polled")
    is_active: bool = Field(True, description="Whether the source is polled")
    last_scraped: Optional[datetime] = Field(None, description="Last successful poll")
    error_count: int = Field(0, description="Consecutive failed polls", ge=0)
