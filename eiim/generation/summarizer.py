"""Summarization client: budgeted, cached LLM calls with local fallbacks."""

import hashlib
import logging
import re
import threading
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..db.cache import Cache
from ..exceptions import SummarizationError
from ..models import Article, MetricRecord
from .budget import RequestBudget
from .fallback import fallback_brief_draft, fallback_summary, fallback_trend_analysis
from .llm_provider import LLMProvider, MockLLMProvider, OpenRouterProvider
from .models import AnomalyAlert, BriefDraft, Completion, TrendAnalysis
from .prompts import (
    build_anomaly_prompt,
    build_brief_prompt,
    build_summary_prompt,
    build_trend_prompt,
    group_by_category,
)

logger = logging.getLogger(__name__)

SUMMARY_CACHE_TTL = 24 * 3600
BRIEF_CACHE_TTL = 6 * 3600
MAX_TOP_CATEGORIES = 5

_SEVERITY_RE = re.compile(r"\b(HIGH|MEDIUM|LOW)\b")


def summary_cache_key(title: str, content: str) -> str:
    digest = hashlib.sha256((title + content).encode("utf-8")).hexdigest()
    return f"summary:{digest[:32]}"


def brief_cache_key(brief_date: date) -> str:
    return f"brief:{brief_date.isoformat()}"


def parse_alerts(text: str, metric_names: Sequence[str] = ()) -> List[AnomalyAlert]:
    """One alert per non-blank line; severity is the first HIGH/MEDIUM/LOW token."""
    now = datetime.now(timezone.utc)
    alerts = []
    for line in (line.strip() for line in text.splitlines()):
        if not line:
            continue
        match = _SEVERITY_RE.search(line.upper())
        mentioned = next((name for name in metric_names if name.lower() in line.lower()), None)
        alerts.append(
            AnomalyAlert(
                id=len(alerts) + 1,
                message=line,
                severity=match.group(1) if match else "LOW",
                timestamp=now,
                metric_name=mentioned,
            )
        )
    return alerts


class SummarizationClient:
    """
    Calls the LLM for summaries, briefs, trend commentary and anomaly alerts.

    Every call reserves a request from the instance's budget before any
    network I/O. Any failure, including an exhausted budget, yields a
    deterministic local result instead of an exception.
    """

    def __init__(
        self,
        provider: LLMProvider,
        cache: Optional[Cache] = None,
        budget: Optional[RequestBudget] = None,
        summarization_model: str = "anthropic/claude-3-haiku",
        analysis_model: str = "anthropic/claude-3-haiku",
    ) -> None:
        self.provider = provider
        self.cache = cache or Cache(None)
        self.budget = budget or RequestBudget()
        self.summarization_model = summarization_model
        self.analysis_model = analysis_model
        self.api_calls = 0
        self.total_tokens = 0
        self.failures = 0
        self._stats_lock = threading.Lock()

    @classmethod
    def from_config(cls, llm_config: Dict[str, Any], cache: Optional[Cache] = None) -> Optional["SummarizationClient"]:
        """
        Build a client from the dict returned by Config.get_llm_config().

        Returns None when the provider needs an API key and none is set.
        """
        if llm_config.get("provider") == "mock":
            provider: LLMProvider = MockLLMProvider()
        else:
            api_key = llm_config.get("api_key")
            if not api_key:
                logger.warning(
                    "No API key in %s, summaries will use the extractive fallback",
                    llm_config.get("api_key_env"),
                )
                return None
            provider = OpenRouterProvider(
                api_key=api_key,
                base_url=llm_config["base_url"],
                timeout=llm_config["timeout"],
                http_referer=llm_config.get("http_referer"),
                app_title=llm_config.get("app_title"),
            )

        return cls(
            provider,
            cache=cache,
            budget=RequestBudget(requests_per_minute=llm_config["requests_per_minute"]),
            summarization_model=llm_config["summarization_model"],
            analysis_model=llm_config["analysis_model"],
        )

    def _count(self, api_calls: int = 0, total_tokens: int = 0, failures: int = 0) -> None:
        with self._stats_lock:
            self.api_calls += api_calls
            self.total_tokens += total_tokens
            self.failures += failures

    def _request(self, model: str, prompt: str, max_tokens: int, temperature: float) -> Completion:
        self.budget.acquire()
        logger.info("Making LLM request to %s", model)
        self._count(api_calls=1)
        completion = self.provider.complete(
            model,
            [{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        self._count(total_tokens=completion.total_tokens)
        self.budget.record_tokens(completion.total_tokens)
        return completion

    def summarize_article(self, title: str, content: str) -> str:
        """Roughly 100-word investor summary of one article."""
        cache_key = summary_cache_key(title, content)
        cached = self.cache.get(cache_key)
        if cached:
            logger.debug("Using cached summary for %s", title)
            return cached

        try:
            completion = self._request(
                self.summarization_model,
                build_summary_prompt(title, content),
                max_tokens=150,
                temperature=0.3,
            )
        except SummarizationError as e:
            self._count(failures=1)
            logger.warning("Error summarizing article '%s': %s", title, e)
            return fallback_summary(content, title)

        self.cache.set(cache_key, completion.text, SUMMARY_CACHE_TTL)
        return completion.text

    def generate_daily_brief(
        self,
        articles: Sequence[Article],
        brief_date: Optional[date] = None,
        use_cache: bool = True,
    ) -> BriefDraft:
        """
        Brief prose for a set of articles.

        Args:
            articles: Articles ordered by priority; must not be empty
            brief_date: Date the brief covers (defaults to today, UTC)
            use_cache: Read the cached draft for this date; forced
                regeneration passes False

        Returns:
            Draft whose ai_model is 'fallback' when the LLM was not used
        """
        if not articles:
            raise ValueError("No articles provided for brief generation")

        brief_date = brief_date or datetime.now(timezone.utc).date()
        cache_key = brief_cache_key(brief_date)
        top_categories = list(group_by_category(articles).keys())[:MAX_TOP_CATEGORIES]

        if use_cache:
            cached = self.cache.get_json(cache_key)
            if cached:
                try:
                    logger.info("Using cached daily brief for %s", brief_date)
                    return BriefDraft(**cached)
                except ValidationError as e:
                    logger.warning("Ignoring malformed cached brief for %s: %s", brief_date, e)

        try:
            completion = self._request(
                self.analysis_model,
                build_brief_prompt(articles),
                max_tokens=1500,
                temperature=0.4,
            )
        except SummarizationError as e:
            self._count(failures=1)
            logger.warning("Error generating daily brief for %s: %s", brief_date, e)
            return fallback_brief_draft(articles, brief_date, MAX_TOP_CATEGORIES)

        draft = BriefDraft(
            content=completion.text,
            article_count=len(articles),
            top_categories=top_categories,
            generated_at=datetime.now(timezone.utc),
            ai_model=self.analysis_model,
        )
        self.cache.set_json(cache_key, draft.model_dump(mode="json"), BRIEF_CACHE_TTL)
        return draft

    def analyze_trends(self, data: Sequence[Dict[str, Any]], data_type: str = "carbon_prices") -> TrendAnalysis:
        """Commentary on a series of data points."""
        try:
            completion = self._request(
                self.analysis_model,
                build_trend_prompt(data, data_type),
                max_tokens=800,
                temperature=0.3,
            )
        except SummarizationError as e:
            self._count(failures=1)
            logger.warning("Error analyzing %s trends: %s", data_type, e)
            return TrendAnalysis(
                analysis=fallback_trend_analysis(len(data), data_type),
                data_type=data_type,
                data_points=len(data),
                generated_at=datetime.now(timezone.utc),
            )

        return TrendAnalysis(
            analysis=completion.text,
            data_type=data_type,
            data_points=len(data),
            generated_at=datetime.now(timezone.utc),
            ai_model=self.analysis_model,
        )

    def detect_anomalies(self, metrics: Sequence[MetricRecord]) -> List[AnomalyAlert]:
        """Severity-tagged alerts for unusual metric values; empty on failure."""
        if not metrics:
            return []
        try:
            completion = self._request(
                self.analysis_model,
                build_anomaly_prompt(metrics),
                max_tokens=500,
                temperature=0.2,
            )
        except SummarizationError as e:
            self._count(failures=1)
            logger.warning("Error detecting anomalies: %s", e)
            return []

        return parse_alerts(completion.text, [m.metric_name for m in metrics])

    def get_usage_stats(self) -> Dict[str, Any]:
        """Get usage statistics."""
        with self._stats_lock:
            counters = {
                "api_calls": self.api_calls,
                "total_tokens": self.total_tokens,
                "failures": self.failures,
            }
        return {
            **counters,
            "requests_remaining": self.budget.remaining,
            "tokens_this_window": self.budget.tokens_this_window,
            "summarization_model": self.summarization_model,
            "analysis_model": self.analysis_model,
        }
