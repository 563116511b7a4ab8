"""Ecosystem metrics collection."""

import logging
from typing import Any, Optional, Sequence

import pendulum
from pydantic import ValidationError

from ..db import Cache, MetricStore
from ..models import MetricRecord, to_metric_value
from .indicators import ROSTER, GeneratorContext, Indicator
from .models import MetricsResult
from .periods import reporting_period

logger = logging.getLogger(__name__)

FALLBACK_TTL_SECONDS = 7 * 86400


def fallback_key(name: str) -> str:
    return f"metric_fallback:{name}"


class MetricsCollector:
    """Run every indicator generator once and upsert by reporting period."""

    def __init__(
        self,
        metrics: MetricStore,
        cache: Optional[Cache] = None,
        roster: Sequence[Indicator] = ROSTER,
        context: Optional[GeneratorContext] = None,
        tz: str = "UTC",
        fallback_ttl_seconds: int = FALLBACK_TTL_SECONDS,
        clock=None,
    ) -> None:
        """
        Initialize metrics collector.

        Args:
            metrics: Metric storage
            cache: Advisory cache for last-known values
            roster: Indicators to collect, in order
            context: Randomness and HTTP for generators
            tz: Timezone for reporting period boundaries
            fallback_ttl_seconds: Lifetime of last-known values
            clock: Returns the current pendulum.DateTime (tests pin it)
        """
        self.metrics = metrics
        self.cache = cache or Cache(None)
        self.roster = list(roster)
        self.context = context or GeneratorContext()
        self.tz = tz
        self.fallback_ttl_seconds = fallback_ttl_seconds
        self.clock = clock or (lambda: pendulum.now(tz))

    def collect_all_metrics(self) -> MetricsResult:
        """
        Collect the roster sequentially.

        A failing generator falls back to the cached last value; with none,
        the indicator is omitted from this run.
        """
        logger.info("Starting collection of %d ecosystem metrics", len(self.roster))
        result = MetricsResult(total_indicators=len(self.roster))
        now = self.clock()

        for indicator in self.roster:
            try:
                value = indicator.generator(self.context)
            except Exception as e:
                logger.warning("Failed to collect %s: %s", indicator.name, e)
                value = self._fallback_value(indicator)
                if value is None:
                    result.omitted.append(indicator.name)
                    continue
                result.from_fallback.append(indicator.name)
            else:
                self._remember(indicator, value)

            record = self.build_record(indicator, value, now)
            _, is_new = self.metrics.upsert(record)
            result.total_collected += 1
            logger.info(
                "%s %s: %s %s",
                "Collected" if is_new else "Updated",
                indicator.name,
                record.value.display(),
                indicator.unit,
            )

        logger.info(
            "Metrics collection completed: %d/%d metrics",
            result.total_collected,
            result.total_indicators,
        )
        return result

    def build_record(self, indicator: Indicator, raw: Any, now: pendulum.DateTime) -> MetricRecord:
        period_start, period_end = reporting_period(indicator.frequency, now, self.tz)
        return MetricRecord(
            metric_name=indicator.name,
            value=to_metric_value(raw),
            unit=indicator.unit,
            period_start=period_start,
            period_end=period_end,
            geography=indicator.geography,
            data_source=indicator.source,
        )

    def _remember(self, indicator: Indicator, value: Any) -> None:
        self.cache.set_json(
            fallback_key(indicator.name),
            to_metric_value(value).model_dump(),
            self.fallback_ttl_seconds,
        )

    def _fallback_value(self, indicator: Indicator) -> Optional[Any]:
        cached = self.cache.get_json(fallback_key(indicator.name))
        if cached is None:
            return None
        try:
            return to_metric_value(cached)
        except (TypeError, ValueError, ValidationError) as e:
            logger.warning("Discarding bad fallback for %s: %s", indicator.name, e)
            return None
