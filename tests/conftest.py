"""Shared fixtures: in-memory stand-ins for Postgres, Redis and the LLM."""

import itertools
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from eiim.db import Cache
from eiim.exceptions import SummarizationError
from eiim.generation import Completion, LLMProvider
from eiim.models import Article, DailyBrief, DataSource, MetricRecord, PricePoint


class FakeRedis:
    """The subset of redis.Redis the cache uses."""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def close(self):
        pass


class FakeArticleStore:
    def __init__(self):
        self.rows: Dict[str, Article] = {}
        self._ids = itertools.count(1)

    def exists(self, url):
        return url in self.rows

    def insert(self, article):
        if article.url in self.rows:
            return None
        article = article.model_copy(update={"id": next(self._ids)})
        self.rows[article.url] = article
        return article.id

    def for_brief(self, brief_date, limit=20):
        day = datetime(brief_date.year, brief_date.month, brief_date.day, tzinfo=timezone.utc)
        start, end = day - timedelta(hours=24), day + timedelta(hours=24)
        eligible = [
            a for a in self.rows.values()
            if a.summary is not None and a.published_date and start <= a.published_date < end
        ]
        eligible.sort(key=lambda a: (a.priority_score, a.published_date), reverse=True)
        return eligible[:limit]


class FakeSourceStore:
    def __init__(self, sources: Optional[List[DataSource]] = None):
        self.sources = {s.id: s for s in (sources or [])}

    def active_feeds(self):
        return [s for _, s in sorted(self.sources.items()) if s.is_active and s.source_type == "rss"]

    def list_all(self):
        return [s for _, s in sorted(self.sources.items())]

    def mark_success(self, source_id):
        source = self.sources[source_id]
        self.sources[source_id] = source.model_copy(
            update={"error_count": 0, "last_scraped": datetime.now(timezone.utc)}
        )

    def mark_failure(self, source_id):
        source = self.sources[source_id]
        self.sources[source_id] = source.model_copy(update={"error_count": source.error_count + 1})


class FakePriceStore:
    def __init__(self):
        self.points: List[PricePoint] = []

    def store_if_absent(self, point, window=timedelta(minutes=5)):
        for existing in self.points:
            if existing.market == point.market and abs(existing.timestamp - point.timestamp) < window:
                return False
        self.points.append(point)
        return True

    def history(self, market, days=30, limit=None):
        points = sorted((p for p in self.points if p.market == market), key=lambda p: p.timestamp)
        return points[-limit:] if limit else points

    def latest(self):
        latest = {}
        for point in sorted(self.points, key=lambda p: p.timestamp):
            latest[point.market] = point
        return list(latest.values())


class FakeMetricStore:
    def __init__(self):
        self.rows: Dict[tuple, MetricRecord] = {}
        self.writes = 0

    def upsert(self, record):
        self.writes += 1
        key = (record.metric_name, record.period_start, record.period_end)
        is_new = key not in self.rows
        self.rows[key] = record.model_copy(update={"recorded_at": datetime.now(timezone.utc)})
        return self.rows[key], is_new


class FakeBriefStore:
    def __init__(self):
        self.rows: Dict[object, DailyBrief] = {}
        self.inserts = 0
        self.replaces = 0

    def get(self, brief_date):
        return self.rows.get(brief_date)

    def insert(self, brief):
        self.inserts += 1
        return self.rows.setdefault(brief.brief_date, brief)

    def replace(self, brief):
        self.replaces += 1
        self.rows[brief.brief_date] = brief
        return brief


class ScriptedProvider(LLMProvider):
    """Returns a fixed reply, or raises when told to fail."""

    def __init__(self, reply="Scripted reply.", fail=False):
        self.reply = reply
        self.fail = fail
        self.calls = []

    def complete(self, model, messages, max_tokens=1000, temperature=0.7):
        self.calls.append({"model": model, "messages": messages, "max_tokens": max_tokens, "temperature": temperature})
        if self.fail:
            raise SummarizationError("upstream unavailable")
        return Completion(text=self.reply, model=model, prompt_tokens=10, completion_tokens=5, total_tokens=15)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis):
    return Cache(fake_redis)


@pytest.fixture
def article_store():
    return FakeArticleStore()


@pytest.fixture
def price_store():
    return FakePriceStore()


@pytest.fixture
def metric_store():
    return FakeMetricStore()


@pytest.fixture
def brief_store():
    return FakeBriefStore()


@pytest.fixture
def provider():
    return ScriptedProvider()


def make_article(url="https://example.com/a", **overrides) -> Article:
    fields = {
        "url": url,
        "title": "Solar developer closes round",
        "content": "A long enough body of text describing a development in the market today.",
        "summary": "Short summary.",
        "source": "Example Wire",
        "published_date": datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc),
        "category": "technology",
        "priority_score": 50,
    }
    fields.update(overrides)
    return Article(**fields)
