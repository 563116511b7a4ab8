"""News collection from registered RSS sources."""

import logging
from datetime import datetime, timezone
from typing import Optional

from psycopg.errors import UniqueViolation

from ..db import ArticleStore, SourceStore
from ..exceptions import CollectionError
from ..generation import SummarizationClient
from ..ingestion import FeedFetcher, FeedItem, clean_html, extractive_summary
from ..models import Article, DataSource
from ..ranking import CategoryClassifier, PriorityScorer
from .models import CollectionResult

logger = logging.getLogger(__name__)

MAX_ENTRIES_PER_FEED = 10


class NewsCollector:
    """Pull feeds, dedup by URL, classify, score, summarize and store."""

    def __init__(
        self,
        articles: ArticleStore,
        sources: SourceStore,
        fetcher: Optional[FeedFetcher] = None,
        summarizer: Optional[SummarizationClient] = None,
        classifier: Optional[CategoryClassifier] = None,
        scorer: Optional[PriorityScorer] = None,
        max_entries_per_feed: int = MAX_ENTRIES_PER_FEED,
    ) -> None:
        """
        Initialize news collector.

        Args:
            articles: Article storage
            sources: Feed source registry
            fetcher: Feed fetcher
            summarizer: LLM client; None means extractive summaries only
            classifier: Category rules
            scorer: Priority rules
            max_entries_per_feed: Entries considered per feed, newest first
        """
        self.articles = articles
        self.sources = sources
        self.fetcher = fetcher or FeedFetcher()
        self.summarizer = summarizer
        self.classifier = classifier or CategoryClassifier()
        self.scorer = scorer or PriorityScorer()
        self.max_entries_per_feed = max_entries_per_feed

    def run_all_sources(self) -> CollectionResult:
        """
        Poll every active rss source in id order.

        A failing source is counted and skipped. If the source list itself
        cannot be read, the result has success=False and the error.
        """
        try:
            active = self.sources.active_feeds()
        except Exception as e:
            logger.error("Could not load RSS sources: %s", e)
            return CollectionResult(success=False, error=str(e))
        logger.info("Starting to scrape %d RSS sources", len(active))

        result = CollectionResult(success=True)
        for source in active:
            try:
                stored = self._collect_source(source, result)
            except Exception as e:
                logger.error("Failed to scrape %s: %s", source.name, e)
                result.failed_sources.append(source.name)
                self.sources.mark_failure(source.id)
                continue

            result.per_source[source.name] = stored
            result.total_articles += stored
            self.sources.mark_success(source.id)
            logger.info("Scraped %d new articles from %s", stored, source.name)

        logger.info(
            "News collection finished: %d new articles, %d failed sources",
            result.total_articles,
            len(result.failed_sources),
        )
        return result

    def _collect_source(self, source: DataSource, result: CollectionResult) -> int:
        feed = self.fetcher.fetch_feed(source.name, source.url)
        if not feed.success:
            raise CollectionError(feed.error or "feed fetch failed")

        stored = 0
        for item in feed.items[: self.max_entries_per_feed]:
            try:
                if self.articles.exists(item.link):
                    result.skipped_duplicates += 1
                    continue
                article = self.process_entry(item, source.name)
                if self.articles.insert(article) is None:
                    result.skipped_duplicates += 1
                    continue
                stored += 1
            except UniqueViolation:
                result.skipped_duplicates += 1
            except Exception as e:
                logger.error("Error processing article %s from %s: %s", item.link, source.name, e)
        return stored

    def process_entry(self, item: FeedItem, source_name: str) -> Article:
        """Turn a feed entry into a scored, summarized article."""
        title = clean_html(item.title)
        content = clean_html(item.content or item.summary or "")

        summary = None
        if self.summarizer is not None:
            summary = self.summarizer.summarize_article(title, content)
        if not summary:
            summary = extractive_summary(content) or None

        return Article(
            url=item.link,
            title=title,
            content=content,
            summary=summary,
            source=source_name,
            published_date=item.published or datetime.now(timezone.utc),
            category=self.classifier.classify(title, content),
            priority_score=self.scorer.score(title, content, source_name),
        )
