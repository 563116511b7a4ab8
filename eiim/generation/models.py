"""Data models for generation."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Completion(BaseModel):
    """Text returned by a chat completion call."""

    text: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model that produced it")
    prompt_tokens: int = Field(0, description="Prompt tokens billed")
    completion_tokens: int = Field(0, description="Completion tokens billed")
    total_tokens: int = Field(0, description="Total tokens billed")


class BriefDraft(BaseModel):
    """Brief content before it is stored."""

    content: str = Field(..., description="Brief prose, markdown")
    article_count: int = Field(..., description="Articles used")
    top_categories: List[str] = Field(default_factory=list, description="Up to five categories")
    generated_at: datetime = Field(..., description="When the draft was produced")
    ai_model: str = Field(..., description="Model id, or 'fallback'")


class TrendAnalysis(BaseModel):
    """Commentary on a time series."""

    analysis: str = Field(..., description="Prose commentary")
    data_type: str = Field(..., description="Series label, e.g. carbon_prices")
    data_points: int = Field(..., description="Number of points analyzed")
    generated_at: datetime = Field(..., description="When the analysis was produced")
    ai_model: str = Field("fallback", description="Model id, or 'fallback'")


class AnomalyAlert(BaseModel):
    """One alert line from anomaly review."""

    id: int = Field(..., description="Position in the response")
    message: str = Field(..., description="Alert text")
    severity: str = Field("LOW", description="LOW, MEDIUM or HIGH")
    timestamp: datetime = Field(..., description="When the alert was parsed")
    metric_name: Optional[str] = Field(None, description="Metric the alert mentions, if any")
