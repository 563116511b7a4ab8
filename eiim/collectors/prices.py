"""Carbon price collection: scrape, then simulate what is missing."""

import logging
import random
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

import httpx
from bs4 import BeautifulSoup

from ..config.models import MarketBaseline, MarketSourceConfig, PricesConfig
from ..db import Cache, PriceStore
from ..exceptions import ScrapeError
from ..generation import SummarizationClient
from ..models import SIMULATED_SOURCE, PricePoint
from .analysis import PriceStatistics, price_statistics
from .models import TrendReport
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

PRICE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:EUR|USD|GBP|€|\$|£)", re.IGNORECASE)

VOLUME_MIN = 5_000_000
VOLUME_MAX = 25_000_000

TREND_COMMENTARY_MIN_POINTS = 10
TREND_COMMENTARY_MAX_POINTS = 50


def extract_price(text: str) -> Optional[float]:
    """First number followed by a currency token, or None."""
    match = PRICE_PATTERN.search(text or "")
    return float(match.group(1)) if match else None


def last_price_key(market: str) -> str:
    return f"last_price:{market}"


class PriceCollector:
    """One price point per tracked market per run."""

    def __init__(
        self,
        prices: PriceStore,
        cache: Optional[Cache] = None,
        config: Optional[PricesConfig] = None,
        retry: Optional[RetryPolicy] = None,
        client: Optional[httpx.Client] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        summarizer: Optional[SummarizationClient] = None,
    ) -> None:
        """
        Initialize price collector.

        Args:
            prices: Price storage
            cache: Advisory cache holding the last simulated price per market
            config: Market sources and simulation baselines
            retry: Retry policy for each source
            client: HTTP client for scrape targets
            rng: Random source for the simulation
            clock: Timestamp source
            summarizer: LLM client for trend commentary
        """
        self.prices = prices
        self.cache = cache or Cache(None)
        self.config = config or PricesConfig()
        self.retry = retry or RetryPolicy()
        self.client = client
        self.rng = rng or random.Random()
        self.clock = clock
        self.summarizer = summarizer
        self.baselines: Dict[str, MarketBaseline] = {b.market: b for b in self.config.baselines}

    def collect_all_prices(self) -> int:
        """
        Collect every configured market, then simulate markets still missing.

        Returns:
            Number of points stored
        """
        produced: Dict[str, PricePoint] = {}

        for source in self.config.sources:
            try:
                point = self.retry.call(self.collect_from_source, source, label=source.name)
            except Exception as e:
                logger.warning("Failed to collect from %s: %s", source.name, e)
                continue
            if point is not None:
                produced[point.market] = point

        for market, baseline in self.baselines.items():
            if market not in produced:
                produced[market] = self.simulate_price(baseline)

        stored = 0
        window = timedelta(minutes=self.config.dedup_window_minutes)
        for point in produced.values():
            if self.prices.store_if_absent(point, window):
                stored += 1
                logger.info("Collected %s price: %.2f %s (%s)", point.market, point.price, point.currency, point.data_source)
            else:
                logger.info("Skipped %s price, a point exists within %s", point.market, window)

        logger.info("Total carbon prices collected: %d", stored)
        return stored

    def collect_from_source(self, source: MarketSourceConfig) -> Optional[PricePoint]:
        if source.type == "api":
            logger.info("API collection not implemented for %s", source.name)
            return None
        return self.scrape(source)

    def scrape(self, source: MarketSourceConfig) -> Optional[PricePoint]:
        """
        Fetch the page and read the price from the selector's text.

        Raises:
            ScrapeError: On transport or HTTP status failure
        """
        headers = {"User-Agent": BROWSER_USER_AGENT}
        try:
            if self.client is not None:
                response = self.client.get(source.url, headers=headers, timeout=self.config.scrape_timeout)
            else:
                with httpx.Client(timeout=self.config.scrape_timeout, follow_redirects=True) as client:
                    response = client.get(source.url, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ScrapeError(f"Scraping failed for {source.name}: {e}", url=source.url) from e

        soup = BeautifulSoup(response.text, "html.parser")
        node = soup.select_one(source.selector or "body")
        price = extract_price(node.get_text(" ") if node else "")
        if price is None:
            logger.info("No price found on %s page", source.name)
            return None

        return PricePoint(
            market=source.market,
            price=price,
            volume=self._volume(),
            currency=source.currency,
            timestamp=self.clock(),
            data_source=f"scraping_{source.name}",
        )

    def simulate_price(self, baseline: MarketBaseline) -> PricePoint:
        """Random walk from the last simulated price, clamped around the base."""
        cache_key = last_price_key(baseline.market)
        last_price = baseline.base_price
        cached = self.cache.get(cache_key)
        if cached:
            try:
                last_price = float(cached)
            except ValueError:
                logger.warning("Ignoring bad cached price for %s: %r", baseline.market, cached)

        walk = self.rng.uniform(-1, 1) * baseline.volatility
        new_price = last_price * (1 + walk + baseline.drift)
        clamped = max(baseline.base_price * 0.5, min(baseline.base_price * 2, new_price))
        price = round(clamped, 2)

        self.cache.set(cache_key, str(price), self.config.cache_ttl_seconds)

        return PricePoint(
            market=baseline.market,
            price=price,
            volume=self._volume(),
            currency=baseline.currency,
            timestamp=self.clock(),
            data_source=SIMULATED_SOURCE,
        )

    def _volume(self) -> int:
        return self.rng.randrange(VOLUME_MIN, VOLUME_MAX)

    def get_historical_analysis(self, market: str, days: int = 30) -> Optional[PriceStatistics]:
        """Statistics over the last N days; None with fewer than two points."""
        history = self.prices.history(market, days=days)
        return price_statistics(market, [p.price for p in history], period_days=days)

    def trend_report(self, market: str, days: int = 30) -> Optional[TrendReport]:
        """Statistics plus LLM commentary when there are enough recent points."""
        statistics = self.get_historical_analysis(market, days)
        if statistics is None:
            return None

        commentary = None
        if self.summarizer is not None:
            recent = self.prices.history(market, days=days, limit=TREND_COMMENTARY_MAX_POINTS)
            if len(recent) > TREND_COMMENTARY_MIN_POINTS:
                commentary = self.summarizer.analyze_trends(
                    [p.model_dump(include={"market", "price", "currency", "timestamp"}) for p in recent],
                    "carbon_prices",
                )
        return TrendReport(statistics=statistics, commentary=commentary)
