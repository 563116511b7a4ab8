"""The ecosystem indicator roster and its value generators."""

import logging
import random
import re
from typing import Callable, Dict, List, NamedTuple, Optional, Union

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

RawValue = Union[float, Dict[str, float]]

GREEN_BOND_URL = "https://www.climatebonds.net/market/data/"
GREEN_BOND_SELECTOR = ".green-bond-volume"
STOCK_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
CLEAN_ENERGY_SYMBOL = "ICLN"

_BILLION_RE = re.compile(r"(\d+(?:\.\d+)?)\s*billion", re.IGNORECASE)


class Indicator(NamedTuple):
    """One roster entry. generator returns the raw value or raises."""

    name: str
    source: str
    frequency: str
    unit: str
    geography: str
    generator: Callable[["GeneratorContext"], RawValue]


class GeneratorContext:
    """What generators may touch: randomness and outbound HTTP."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self.rng = rng or random.Random()
        self.client = client
        self.timeout = timeout

    def perturb(self, base: float, spread: float, decimals: Optional[int] = None) -> float:
        """base * (1 + U(-0.5, 0.5) * spread), rounded to an integer unless decimals is given."""
        value = base * (1 + (self.rng.random() - 0.5) * spread)
        if decimals is None:
            return float(round(value))
        return round(value, decimals)

    def get(self, url: str, timeout: Optional[float] = None, **kwargs) -> httpx.Response:
        timeout = timeout or self.timeout
        if self.client is not None:
            response = self.client.get(url, timeout=timeout, **kwargs)
        else:
            with httpx.Client(timeout=timeout, follow_redirects=True) as client:
                response = client.get(url, **kwargs)
        response.raise_for_status()
        return response


def perturbed(base: float, spread: float, decimals: Optional[int] = None) -> Callable[[GeneratorContext], RawValue]:
    """Generator that perturbs a fixed baseline."""

    def generate(ctx: GeneratorContext) -> RawValue:
        return ctx.perturb(base, spread, decimals)

    return generate


DEAL_STAGE_BASELINES = {
    "Pre-seed": 2_500_000,
    "Seed": 8_500_000,
    "Series A": 25_000_000,
    "Series B": 55_000_000,
    "Series C+": 125_000_000,
}


def deal_size_by_stage(ctx: GeneratorContext) -> RawValue:
    return {stage: ctx.perturb(base, 0.3) for stage, base in DEAL_STAGE_BASELINES.items()}


def green_bond_issuance(ctx: GeneratorContext) -> RawValue:
    """Scrape the headline volume, else perturb the baseline."""
    try:
        response = ctx.get(GREEN_BOND_URL, timeout=10.0, headers={"User-Agent": "EIIM/1.0"})
        node = BeautifulSoup(response.text, "html.parser").select_one(GREEN_BOND_SELECTOR)
        match = _BILLION_RE.search(node.get_text(" ") if node else "")
        if match:
            return float(match.group(1)) * 1_000_000_000
    except httpx.HTTPError as e:
        logger.warning("Failed to scrape green bond data: %s", e)
    return ctx.perturb(156_000_000_000, 0.15)


def _market_price(payload) -> Optional[float]:
    """chart.result[0].meta.regularMarketPrice, or None if the payload has another shape."""
    chart = payload.get("chart") if isinstance(payload, dict) else None
    results = chart.get("result") if isinstance(chart, dict) else None
    first = results[0] if isinstance(results, list) and results else None
    meta = first.get("meta") if isinstance(first, dict) else None
    price = meta.get("regularMarketPrice") if isinstance(meta, dict) else None
    if isinstance(price, (int, float)) and not isinstance(price, bool):
        return float(price)
    return None


def clean_energy_index(ctx: GeneratorContext) -> RawValue:
    """Latest clean energy ETF price from the chart API, else perturb the baseline."""
    try:
        response = ctx.get(STOCK_CHART_URL.format(symbol=CLEAN_ENERGY_SYMBOL), timeout=5.0)
        price = _market_price(response.json())
        if price is not None:
            return price
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Failed to get stock index data: %s", e)
    return ctx.perturb(1245, 0.1)


ROSTER: List[Indicator] = [
    Indicator("Climate Tech Venture Funding Volume", "pwc_climatech", "quarterly", "USD", "Global",
              perturbed(12_800_000_000, 0.2)),
    Indicator("Climate Tech Deal Count", "ctvc_database", "monthly", "count", "Global",
              perturbed(847, 0.15)),
    Indicator("Average Deal Size by Stage", "pitchbook", "quarterly", "USD", "Global",
              deal_size_by_stage),
    Indicator("New Climate Fund Formation", "preqin", "quarterly", "count", "Global",
              perturbed(45, 0.25)),
    Indicator("Green Bond Issuance Volume", "climate_bonds_initiative", "monthly", "USD", "Global",
              green_bond_issuance),
    Indicator("ESG Fund Flows", "morningstar", "monthly", "USD", "Global",
              perturbed(89_200_000_000, 0.2)),
    Indicator("Clean Energy Stock Index Performance", "yahoo_finance", "daily", "index", "Global",
              clean_energy_index),
    Indicator("Carbon Credit Market Volume", "ecosystem_marketplace", "monthly", "tonnes_co2", "Global",
              perturbed(450_000_000, 0.2)),
    Indicator("Climate Patent Filings", "wipo", "quarterly", "count", "Global",
              perturbed(2847, 0.18)),
    Indicator("Corporate Net-Zero Commitments", "sbti", "monthly", "count", "Global",
              perturbed(1256, 0.1)),
    Indicator("Renewable Energy Capacity Additions", "irena", "quarterly", "GW", "Global",
              perturbed(385, 0.15)),
    Indicator("Carbon Removal Deployment", "cdr_database", "quarterly", "tonnes_co2", "Global",
              perturbed(2_500_000, 0.3)),
    Indicator("Environmental Policy Stringency Index", "oecd", "annual", "index", "OECD+",
              perturbed(2.85, 0.1, decimals=2)),
    Indicator("Government Green Investment as % GDP", "iea", "annual", "percentage", "Global",
              perturbed(1.8, 0.2, decimals=2)),
    Indicator("Biodiversity Credit Market Volume", "pollination_group", "quarterly", "USD", "Global",
              perturbed(45_000_000, 0.4)),
    Indicator("Blue Carbon Project Pipeline", "blue_carbon_initiative", "quarterly", "hectares", "Global",
              perturbed(125_000, 0.25)),
    Indicator("Water Credit Market Activity", "epa", "quarterly", "credits", "US",
              perturbed(1_850_000, 0.2)),
    Indicator("Plastic Credit Market Volume", "verra", "quarterly", "tonnes", "Global",
              perturbed(875_000, 0.3)),
]
