import json

import httpx
import pendulum
import pytest

from eiim.collectors import ROSTER, GeneratorContext, Indicator, MetricsCollector
from eiim.collectors.indicators import clean_energy_index, deal_size_by_stage, green_bond_issuance
from eiim.collectors.metrics import fallback_key
from eiim.models import NumericValue, StructuredValue

NOW = pendulum.datetime(2024, 5, 18, 10, 0, tz="UTC")


class MidpointRng:
    """random() at the midpoint leaves perturbed baselines unchanged."""

    def random(self):
        return 0.5


def _offline_context(handler=None):
    handler = handler or (lambda request: httpx.Response(503))
    return GeneratorContext(rng=MidpointRng(), client=httpx.Client(transport=httpx.MockTransport(handler)))


def _collector(metric_store, cache=None, roster=ROSTER, context=None):
    return MetricsCollector(
        metric_store,
        cache=cache,
        roster=roster,
        context=context or _offline_context(),
        clock=lambda: NOW,
    )


def _failing(ctx):
    raise RuntimeError("upstream down")


def test_roster_names_are_unique():
    names = [indicator.name for indicator in ROSTER]
    assert len(names) == 18
    assert len(set(names)) == 18


def test_full_run_writes_every_indicator(metric_store):
    result = _collector(metric_store).collect_all_metrics()

    assert result.total_collected == 18
    assert result.total_indicators == 18
    assert result.omitted == []
    assert len(metric_store.rows) == 18


def test_repeated_runs_upsert_within_period(metric_store):
    collector = _collector(metric_store)
    collector.collect_all_metrics()
    collector.collect_all_metrics()

    assert metric_store.writes == 36
    assert len(metric_store.rows) == 18


def test_periods_follow_frequency(metric_store):
    _collector(metric_store).collect_all_metrics()
    by_name = {name: (start, end) for (name, start, end) in metric_store.rows}

    assert by_name["Climate Tech Deal Count"] == (
        pendulum.datetime(2024, 5, 1, tz="UTC"),
        pendulum.datetime(2024, 6, 1, tz="UTC"),
    )
    assert by_name["Climate Tech Venture Funding Volume"] == (
        pendulum.datetime(2024, 4, 1, tz="UTC"),
        pendulum.datetime(2024, 7, 1, tz="UTC"),
    )
    assert by_name["Environmental Policy Stringency Index"] == (
        pendulum.datetime(2024, 1, 1, tz="UTC"),
        pendulum.datetime(2025, 1, 1, tz="UTC"),
    )


def test_values_keep_their_shape(metric_store):
    _collector(metric_store).collect_all_metrics()
    records = {record.metric_name: record for record in metric_store.rows.values()}

    deal_size = records["Average Deal Size by Stage"].value
    assert isinstance(deal_size, StructuredValue)
    assert deal_size.values["Seed"] == 8_500_000
    assert records["Climate Tech Deal Count"].value == NumericValue(value=847)
    assert records["Environmental Policy Stringency Index"].value.value == 2.85
    assert records["Water Credit Market Activity"].geography == "US"


def test_failed_generator_uses_cached_fallback(metric_store, cache, fake_redis):
    fake_redis.data[fallback_key("Flaky")] = json.dumps({"kind": "numeric", "value": 42})
    roster = [Indicator("Flaky", "test", "monthly", "count", "Global", _failing)]

    result = _collector(metric_store, cache=cache, roster=roster).collect_all_metrics()

    assert result.from_fallback == ["Flaky"]
    record = next(iter(metric_store.rows.values()))
    assert record.value == NumericValue(value=42)


def test_failed_generator_without_fallback_is_omitted(metric_store, cache):
    roster = [
        Indicator("Flaky", "test", "monthly", "count", "Global", _failing),
        Indicator("Steady", "test", "monthly", "count", "Global", lambda ctx: 5),
    ]

    result = _collector(metric_store, cache=cache, roster=roster).collect_all_metrics()

    assert result.omitted == ["Flaky"]
    assert result.total_collected == 1
    assert [key[0] for key in metric_store.rows] == ["Steady"]


def test_success_refreshes_fallback(metric_store, cache, fake_redis):
    roster = [Indicator("Steady", "test", "monthly", "count", "Global", lambda ctx: 5)]

    _collector(metric_store, cache=cache, roster=roster).collect_all_metrics()

    assert json.loads(fake_redis.data[fallback_key("Steady")]) == {"kind": "numeric", "value": 5.0}
    assert fake_redis.ttls[fallback_key("Steady")] == 7 * 86400


def test_deal_size_by_stage_has_every_stage():
    value = deal_size_by_stage(GeneratorContext(rng=MidpointRng()))
    assert list(value) == ["Pre-seed", "Seed", "Series A", "Series B", "Series C+"]


def test_green_bond_reads_scraped_volume():
    html = '<div class="green-bond-volume">Issued 512.5 billion so far</div>'
    ctx = _offline_context(lambda request: httpx.Response(200, text=html))
    assert green_bond_issuance(ctx) == 512.5e9


def test_green_bond_falls_back_to_baseline():
    assert green_bond_issuance(_offline_context()) == 156_000_000_000


def test_clean_energy_index_reads_market_price():
    payload = {"chart": {"result": [{"meta": {"regularMarketPrice": 17.3}}]}}
    ctx = _offline_context(lambda request: httpx.Response(200, json=payload))
    assert clean_energy_index(ctx) == 17.3


def test_clean_energy_index_falls_back_on_bad_payload():
    ctx = _offline_context(lambda request: httpx.Response(200, text="not json"))
    assert clean_energy_index(ctx) == 1245


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"chart": []},
        {"chart": {"result": ["not a dict"]}},
        {"chart": {"result": [{"meta": {"regularMarketPrice": "n/a"}}]}},
        {"chart": {"result": []}},
    ],
)
def test_clean_energy_index_falls_back_on_unexpected_shape(payload):
    ctx = _offline_context(lambda request: httpx.Response(200, json=payload))
    assert clean_energy_index(ctx) == 1245


def test_unexpected_stock_payload_still_yields_a_value(metric_store, cache):
    roster = [indicator for indicator in ROSTER if indicator.name == "Clean Energy Stock Index Performance"]
    context = _offline_context(lambda request: httpx.Response(200, json={"chart": []}))

    result = _collector(metric_store, cache=cache, roster=roster, context=context).collect_all_metrics()

    assert result.total_collected == 1
    assert result.omitted == []
    assert next(iter(metric_store.rows.values())).value == NumericValue(value=1245)
