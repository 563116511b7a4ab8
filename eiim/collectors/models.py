"""Result models for collection runs."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..generation.models import TrendAnalysis
from .analysis import PriceStatistics


class CollectionResult(BaseModel):
    """Outcome of one news collection run."""

    success: bool = Field(..., description="False only when the run itself could not proceed")
    total_articles: int = Field(0, description="New articles stored")
    per_source: Dict[str, int] = Field(default_factory=dict, description="New articles per source")
    failed_sources: List[str] = Field(default_factory=list, description="Sources whose fetch failed")
    skipped_duplicates: int = Field(0, description="Entries already stored")
    error: Optional[str] = Field(None, description="Run-level error")


class MetricsResult(BaseModel):
    """Outcome of one metrics collection run."""

    total_collected: int = Field(0, description="Indicators written")
    total_indicators: int = Field(0, description="Indicators attempted")
    from_fallback: List[str] = Field(default_factory=list, description="Indicators filled from the fallback cache")
    omitted: List[str] = Field(default_factory=list, description="Indicators with no value")


class TrendReport(BaseModel):
    """Price statistics with optional LLM commentary."""

    statistics: PriceStatistics
    commentary: Optional[TrendAnalysis] = None
