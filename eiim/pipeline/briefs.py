"""Daily brief assembly."""

import logging
import threading
from datetime import date
from typing import Dict, Optional

from ..db import ArticleStore, BriefStore
from ..generation import BriefDraft, SummarizationClient
from ..generation.fallback import fallback_brief_draft
from ..models import DailyBrief

logger = logging.getLogger(__name__)

BRIEF_ARTICLE_LIMIT = 20


class BriefAssembler:
    """Build and store the brief for a calendar date."""

    def __init__(
        self,
        articles: ArticleStore,
        briefs: BriefStore,
        summarizer: Optional[SummarizationClient] = None,
        article_limit: int = BRIEF_ARTICLE_LIMIT,
    ) -> None:
        self.articles = articles
        self.briefs = briefs
        self.summarizer = summarizer
        self.article_limit = article_limit
        self._date_locks: Dict[date, threading.Lock] = {}
        self._date_locks_guard = threading.Lock()

    def _lock_for(self, brief_date: date) -> threading.Lock:
        with self._date_locks_guard:
            return self._date_locks.setdefault(brief_date, threading.Lock())

    def generate_brief_for_date(self, brief_date: date, force: bool = False) -> Optional[DailyBrief]:
        """
        Return the brief for a date, generating it if needed.

        Without force an existing brief is returned unchanged. With force the
        brief is regenerated and replaces the stored row; concurrent forced
        runs for the same date are serialized.

        Returns:
            The stored brief, or None when no summarized articles fall in the
            window around the date
        """
        if not force:
            existing = self.briefs.get(brief_date)
            if existing is not None:
                logger.info("Brief for %s already exists", brief_date)
                return existing
            return self._generate(brief_date, force=False)

        with self._lock_for(brief_date):
            return self._generate(brief_date, force=True)

    def _generate(self, brief_date: date, force: bool) -> Optional[DailyBrief]:
        articles = self.articles.for_brief(brief_date, limit=self.article_limit)
        if not articles:
            logger.warning("No articles found for brief on %s", brief_date)
            return None

        logger.info("Generating brief for %s from %d articles", brief_date, len(articles))
        draft = self._draft(articles, brief_date, force)

        brief = DailyBrief(
            brief_date=brief_date,
            content=draft.content,
            article_count=draft.article_count,
            top_categories=draft.top_categories,
            ai_model_used=draft.ai_model,
            generated_at=draft.generated_at,
        )
        stored = self.briefs.replace(brief) if force else self.briefs.insert(brief)
        logger.info("Stored brief for %s (model %s)", brief_date, stored.ai_model_used)
        return stored

    def _draft(self, articles, brief_date: date, force: bool) -> BriefDraft:
        if self.summarizer is None:
            return fallback_brief_draft(articles, brief_date)
        return self.summarizer.generate_daily_brief(articles, brief_date, use_cache=not force)
