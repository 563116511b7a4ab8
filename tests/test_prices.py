import random
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from conftest import ScriptedProvider
from eiim.collectors import PriceCollector, RetryPolicy, extract_price
from eiim.collectors.prices import VOLUME_MAX, VOLUME_MIN, last_price_key
from eiim.config.models import MarketBaseline, MarketSourceConfig, PricesConfig
from eiim.exceptions import ScrapeError
from eiim.generation import SummarizationClient
from eiim.models import SIMULATED_SOURCE, PricePoint

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

EU_BASELINE = MarketBaseline(market="eu_ets", base_price=85.50, currency="EUR", volatility=0.03, drift=0.001)


class FixedRng:
    """uniform() always returns the upper bound."""

    def uniform(self, a, b):
        return b

    def randrange(self, start, stop):
        return start


class Clock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def _collector(price_store, cache=None, sources=(), baselines=(EU_BASELINE,), **kwargs):
    config = PricesConfig(sources=list(sources), baselines=list(baselines))
    kwargs.setdefault("retry", RetryPolicy(max_attempts=3, base_delay=0, sleep=lambda s: None))
    kwargs.setdefault("clock", Clock())
    return PriceCollector(price_store, cache=cache, config=config, **kwargs)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Settlement 85.42 EUR per tonne", 85.42),
        ("Auction cleared at $28.15", None),
        ("Auction cleared at 28.15$", 28.15),
        ("UK allowance 72 gbp", 72.0),
        ("No numbers here", None),
    ],
)
def test_extract_price(text, expected):
    assert extract_price(text) == expected


def test_simulation_stores_one_point_per_market(price_store):
    collector = _collector(price_store, rng=random.Random(7))

    assert collector.collect_all_prices() == 1

    point = price_store.points[0]
    assert point.market == "eu_ets"
    assert point.data_source == SIMULATED_SOURCE
    assert point.is_simulated
    assert 85.50 * 0.5 <= point.price <= 85.50 * 2
    assert VOLUME_MIN <= point.volume < VOLUME_MAX


def test_second_run_within_window_is_skipped(price_store):
    clock = Clock()
    collector = _collector(price_store, clock=clock)

    collector.collect_all_prices()
    clock.now = T0 + timedelta(minutes=3)
    assert collector.collect_all_prices() == 0

    clock.now = T0 + timedelta(minutes=10)
    assert collector.collect_all_prices() == 1
    assert len(price_store.points) == 2


def test_simulation_walks_from_cached_price_and_clamps(price_store, cache, fake_redis):
    fake_redis.data[last_price_key("eu_ets")] = "500"
    collector = _collector(price_store, cache=cache, rng=FixedRng())

    point = collector.simulate_price(EU_BASELINE)

    assert point.price == 171.0
    assert fake_redis.data[last_price_key("eu_ets")] == "171.0"
    assert fake_redis.ttls[last_price_key("eu_ets")] == 86400


def test_simulation_starts_from_base_without_cache(price_store):
    collector = _collector(price_store, rng=FixedRng())
    point = collector.simulate_price(EU_BASELINE)
    # 85.50 * (1 + 0.03 + 0.001)
    assert point.price == 88.15
    assert point.volume == VOLUME_MIN


def test_scrape_reads_price_from_selector(price_store):
    html = '<html><body><p>Other 1 EUR</p><table class="market-data-table"><td>Spot 84.75 EUR</td></table></body></html>'
    seen = {}

    def handler(request):
        seen["ua"] = request.headers["User-Agent"]
        return httpx.Response(200, text=html)

    source = MarketSourceConfig(
        name="EU ETS", market="eu_ets", url="https://eex.example/spot",
        selector=".market-data-table", currency="EUR",
    )
    collector = _collector(price_store, sources=[source], client=_client(handler))

    assert collector.collect_all_prices() == 1
    point = price_store.points[0]
    assert point.price == 84.75
    assert point.data_source == "scraping_EU ETS"
    assert point.timestamp == T0
    assert "Mozilla" in seen["ua"]


def test_scrape_without_price_falls_back_to_simulation(price_store):
    source = MarketSourceConfig(name="RGGI", market="eu_ets", url="https://rggi.example", currency="USD")
    collector = _collector(
        price_store, sources=[source], client=_client(lambda r: httpx.Response(200, text="<p>closed</p>"))
    )

    collector.collect_all_prices()

    assert price_store.points[0].is_simulated


def test_http_failures_are_retried_then_simulated(price_store):
    calls = []
    sleeps = []

    def handler(request):
        calls.append(request.url)
        return httpx.Response(503)

    source = MarketSourceConfig(name="EU ETS", market="eu_ets", url="https://eex.example/spot", currency="EUR")
    collector = _collector(
        price_store,
        sources=[source],
        client=_client(handler),
        retry=RetryPolicy(max_attempts=3, base_delay=5, sleep=sleeps.append),
    )

    assert collector.collect_all_prices() == 1
    assert len(calls) == 3
    assert sleeps == [5, 10]
    assert price_store.points[0].is_simulated


def test_scrape_raises_scrape_error(price_store):
    source = MarketSourceConfig(name="EU ETS", market="eu_ets", url="https://eex.example/spot", currency="EUR")
    collector = _collector(price_store, client=_client(lambda r: httpx.Response(500)))
    with pytest.raises(ScrapeError):
        collector.scrape(source)


def test_api_sources_produce_nothing(price_store):
    source = MarketSourceConfig(name="Feed", market="eu_ets", type="api", url="https://api.example", currency="EUR")
    assert _collector(price_store).collect_from_source(source) is None


def _seed_history(price_store, prices):
    for i, price in enumerate(prices):
        price_store.points.append(PricePoint(
            market="eu_ets", price=price, currency="EUR",
            timestamp=T0 + timedelta(hours=i), data_source=SIMULATED_SOURCE,
        ))


def test_historical_analysis(price_store):
    _seed_history(price_store, [80.0, 82.0, 84.0])
    stats = _collector(price_store).get_historical_analysis("eu_ets", days=30)
    assert stats.data_points == 3
    assert stats.trend == "increasing"
    assert stats.average == 82.0


def test_historical_analysis_needs_two_points(price_store):
    _seed_history(price_store, [80.0])
    assert _collector(price_store).get_historical_analysis("eu_ets") is None


def test_trend_commentary_needs_more_than_ten_points(price_store):
    provider = ScriptedProvider(reply="Firming.")
    summarizer = SummarizationClient(provider)
    _seed_history(price_store, [80.0 + i for i in range(10)])
    collector = _collector(price_store, summarizer=summarizer)

    report = collector.trend_report("eu_ets")
    assert report.commentary is None
    assert provider.calls == []

    _seed_history(price_store, [95.0])
    report = collector.trend_report("eu_ets")
    assert report.commentary.analysis == "Firming."
    assert report.statistics.data_points == 11
