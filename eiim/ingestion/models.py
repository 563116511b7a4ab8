"""Data models for ingestion."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """Parsed feed entry, before cleaning."""

    title: str = Field("", description="Entry title, may contain HTML")
    link: str = Field(..., description="Entry URL")
    published: Optional[datetime] = Field(None, description="Publication date")
    content: Optional[str] = Field(None, description="Full content, may contain HTML")
    summary: Optional[str] = Field(None, description="Summary/description, may contain HTML")
    source_name: str = Field(..., description="Source name")


class FeedResult(BaseModel):
    """Result of fetching a feed."""

    source_name: str = Field(..., description="Source name")
    source_url: str = Field(..., description="Feed URL")
    success: bool = Field(..., description="Whether fetch was successful")
    items: list[FeedItem] = Field(default_factory=list, description="Parsed feed items")
    error: Optional[str] = Field(None, description="Error message if failed")
    item_count: int = Field(0, description="Number of items fetched")
