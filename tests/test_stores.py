"""Store SQL against a recording connection: bound parameters, conflict targets, row mapping."""

import json
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone

from conftest import make_article
from eiim.db import ArticleStore, BriefStore, MetricStore, PriceStore, SourceStore
from eiim.db.init import validate_connection
from eiim.models import DailyBrief, MetricRecord, PricePoint, StructuredValue

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _sql(text):
    return " ".join(text.split())


class RecordingCursor:
    def __init__(self, conn):
        self.conn = conn

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((_sql(sql), params))

    def fetchone(self):
        return self.conn.replies.pop(0)

    def fetchall(self):
        return self.conn.replies.pop(0)


class RecordingConnection:
    """Records statements; fetch calls consume the scripted replies in order."""

    def __init__(self, replies=()):
        self.replies = list(replies)
        self.executed = []
        self.commits = 0

    def cursor(self):
        return RecordingCursor(self)

    def execute(self, sql, params=None):
        self.executed.append((_sql(sql), params))

    def commit(self):
        self.commits += 1


class RecordingGateway:
    def __init__(self, *replies):
        self.conn = RecordingConnection(replies)

    @contextmanager
    def connection(self):
        yield self.conn

    @property
    def executed(self):
        return self.conn.executed


def _point(**overrides):
    fields = {
        "market": "eu_ets",
        "price": 85.42,
        "volume": 1_000_000,
        "currency": "EUR",
        "timestamp": T0,
        "data_source": "realistic_simulation",
    }
    fields.update(overrides)
    return PricePoint(**fields)


def test_price_insert_is_serialized_per_market_and_checks_both_sides():
    gateway = RecordingGateway(None)

    assert PriceStore(gateway).store_if_absent(_point(), timedelta(minutes=5)) is True

    lock, check, insert = gateway.executed
    assert lock == ("SELECT pg_advisory_xact_lock(hashtext(%s))", ("carbon_prices:eu_ets",))
    assert "timestamp > %s AND timestamp < %s" in check[0]
    assert check[1] == ("eu_ets", T0 - timedelta(minutes=5), T0 + timedelta(minutes=5))
    assert insert[0].startswith("INSERT INTO carbon_prices")
    assert insert[1] == ("eu_ets", 85.42, 1_000_000, "EUR", T0, "realistic_simulation")
    assert gateway.conn.commits == 1


def test_price_within_window_is_not_inserted():
    gateway = RecordingGateway({"id": 7})

    assert PriceStore(gateway).store_if_absent(_point(), timedelta(minutes=5)) is False

    assert len(gateway.executed) == 2
    assert not any(sql.startswith("INSERT") for sql, _ in gateway.executed)


def test_price_history_maps_rows_oldest_first_query():
    row = _point().model_dump()
    gateway = RecordingGateway([row])

    points = PriceStore(gateway).history("eu_ets", days=30, limit=50)

    sql, params = gateway.executed[0]
    assert params == ("eu_ets", 30, 50)
    assert sql.endswith("ORDER BY timestamp ASC")
    assert points == [_point()]


def _metric_record():
    return MetricRecord(
        metric_name="Average Deal Size by Stage",
        value=StructuredValue(values={"Seed": 8_500_000.0}),
        unit="USD",
        period_start=datetime(2024, 4, 1, tzinfo=timezone.utc),
        period_end=datetime(2024, 7, 1, tzinfo=timezone.utc),
        data_source="pitchbook",
    )


def _metric_row(record, inserted):
    row = record.model_dump()
    row.update({"id": 3, "value_kind": record.value.kind, "recorded_at": T0, "inserted": inserted})
    return row


def test_metric_upsert_targets_the_period_key():
    record = _metric_record()
    gateway = RecordingGateway(_metric_row(record, True))

    stored, is_new = MetricStore(gateway).upsert(record)

    sql, params = gateway.executed[0]
    assert "ON CONFLICT (metric_name, period_start, period_end) DO UPDATE SET" in sql
    assert "RETURNING *, (xmax = 0) AS inserted" in sql
    assert params[0] == "Average Deal Size by Stage"
    assert params[1] == "structured"
    assert json.loads(params[2]) == {"kind": "structured", "values": {"Seed": 8_500_000.0}}
    assert params[4:6] == (record.period_start, record.period_end)
    assert is_new is True
    assert stored.id == 3
    assert stored.value == record.value
    assert stored.recorded_at == T0


def test_metric_upsert_reports_update():
    record = _metric_record()
    _, is_new = MetricStore(RecordingGateway(_metric_row(record, False))).upsert(record)
    assert is_new is False


def _brief(content="# Brief"):
    return DailyBrief(
        brief_date=date(2024, 5, 1),
        content=content,
        article_count=4,
        top_categories=["technology", "carbon-markets"],
        ai_model_used="m",
        generated_at=T0,
    )


def test_brief_insert_returns_existing_row_on_conflict():
    existing = _brief("# Earlier").model_dump()
    gateway = RecordingGateway(None, existing)

    stored = BriefStore(gateway).insert(_brief())

    insert, select = gateway.executed
    assert "ON CONFLICT (brief_date) DO NOTHING" in insert[0]
    assert insert[1] == (date(2024, 5, 1), "# Brief", 4, ["technology", "carbon-markets"], "m", T0)
    assert select == ("SELECT * FROM daily_briefs WHERE brief_date = %s", (date(2024, 5, 1),))
    assert stored.content == "# Earlier"


def test_brief_replace_overwrites_content():
    gateway = RecordingGateway(_brief("# Fresh").model_dump())

    stored = BriefStore(gateway).replace(_brief("# Fresh"))

    sql, _ = gateway.executed[0]
    assert "ON CONFLICT (brief_date) DO UPDATE SET content = EXCLUDED.content" in sql
    assert len(gateway.executed) == 1
    assert stored.content == "# Fresh"


def test_articles_for_brief_use_a_day_either_side():
    article = make_article().model_dump()
    gateway = RecordingGateway([article])

    articles = ArticleStore(gateway).for_brief(date(2024, 5, 1), limit=20)

    sql, params = gateway.executed[0]
    assert "published_date >= %s::date - INTERVAL '24 hours'" in sql
    assert "published_date < %s::date + INTERVAL '24 hours'" in sql
    assert "summary IS NOT NULL" in sql
    assert "ORDER BY priority_score DESC, published_date DESC" in sql
    assert params == (date(2024, 5, 1), date(2024, 5, 1), 20)
    assert articles[0].url == "https://example.com/a"


def test_article_insert_skips_existing_url():
    store = ArticleStore(RecordingGateway(None))
    assert store.insert(make_article()) is None
    assert "ON CONFLICT (url) DO NOTHING" in store.gateway.executed[0][0]

    assert ArticleStore(RecordingGateway({"id": 11})).insert(make_article()) == 11


def test_source_failure_increments_error_count():
    gateway = RecordingGateway()
    SourceStore(gateway).mark_failure(4)
    assert gateway.executed == [("UPDATE data_sources SET error_count = error_count + 1 WHERE id = %s", (4,))]


def test_validate_connection():
    assert validate_connection(RecordingGateway({"ok": 1})) is True
    assert validate_connection(RecordingGateway()) is False
