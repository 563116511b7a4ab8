"""LLM summarization, briefs and trend commentary."""

from .budget import RequestBudget
from .llm_provider import LLMProvider, MockLLMProvider, OpenRouterProvider
from .models import AnomalyAlert, BriefDraft, Completion, TrendAnalysis
from .summarizer import SummarizationClient, parse_alerts

__all__ = [
    "AnomalyAlert",
    "BriefDraft",
    "Completion",
    "LLMProvider",
    "MockLLMProvider",
    "OpenRouterProvider",
    "RequestBudget",
    "SummarizationClient",
    "TrendAnalysis",
    "parse_alerts",
]
