"""Scheduled collection and brief generation."""

import logging
import threading
from typing import Callable, Dict, List, Optional

import httpx
import pendulum

from ..collectors import GeneratorContext, MetricsCollector, NewsCollector, PriceCollector, RetryPolicy
from ..config import Config, ScheduleConfig
from ..db import ArticleStore, BriefStore, Gateway, MetricStore, PriceStore, SourceStore
from ..generation import SummarizationClient
from ..ingestion import FeedFetcher
from ..ranking import PriorityScorer
from .briefs import BriefAssembler
from .scheduler import DailyTrigger, IntervalTrigger, Scheduler

logger = logging.getLogger(__name__)

JOB_NAMES = ("news", "prices", "metrics", "brief")


class Orchestrator:
    """
    Runs the collectors and brief assembly on their schedules.

    Each job type has its own non-blocking lock: a trigger that fires while
    the same job is still running is skipped. Different job types run on
    separate worker threads and may overlap.
    """

    def __init__(
        self,
        news: NewsCollector,
        prices: PriceCollector,
        metrics: MetricsCollector,
        briefs: BriefAssembler,
        schedule: Optional[ScheduleConfig] = None,
        tz: str = "UTC",
        gateway: Optional[Gateway] = None,
        summarizer: Optional[SummarizationClient] = None,
        clock: Optional[Callable[[], pendulum.DateTime]] = None,
    ) -> None:
        self.news = news
        self.prices = prices
        self.metrics = metrics
        self.briefs = briefs
        self.schedule = schedule or ScheduleConfig()
        self.tz = tz
        self.gateway = gateway
        self.summarizer = summarizer
        self.clock = clock or (lambda: pendulum.now(tz))

        self._jobs: Dict[str, Callable[[], object]] = {
            "news": self.news.run_all_sources,
            "prices": self.prices.collect_all_prices,
            "metrics": self.metrics.collect_all_metrics,
            "brief": self.generate_todays_brief,
        }
        self._locks = {name: threading.Lock() for name in JOB_NAMES}
        self._workers: List[threading.Thread] = []
        self._stop_event = threading.Event()

    @classmethod
    def from_config(cls, config: Config) -> "Orchestrator":
        """Connect to Postgres and Redis and wire every component."""
        model = config.config
        gateway = Gateway.connect(config.get_db_config(), config.get_redis_url())
        summarizer = SummarizationClient.from_config(config.get_llm_config(), cache=gateway.cache)
        retry = RetryPolicy(max_attempts=model.retry.max_attempts, base_delay=model.retry.base_delay)
        articles = ArticleStore(gateway)

        news = NewsCollector(
            articles,
            SourceStore(gateway),
            fetcher=FeedFetcher(timeout=model.news.timeout, user_agent=model.news.user_agent),
            summarizer=summarizer,
            scorer=PriorityScorer(reputable_sources=model.news.reputable_sources),
            max_entries_per_feed=model.news.max_entries_per_feed,
        )

        prices = PriceCollector(
            PriceStore(gateway),
            cache=gateway.cache,
            config=model.prices,
            retry=retry,
            summarizer=summarizer,
        )
        metrics = MetricsCollector(
            MetricStore(gateway),
            cache=gateway.cache,
            context=GeneratorContext(client=httpx.Client(follow_redirects=True), timeout=model.metrics.fetch_timeout),
            tz=model.timezone,
            fallback_ttl_seconds=model.metrics.fallback_ttl_seconds,
        )
        briefs = BriefAssembler(articles, BriefStore(gateway), summarizer=summarizer)

        return cls(
            news,
            prices,
            metrics,
            briefs,
            schedule=model.schedule,
            tz=model.timezone,
            gateway=gateway,
            summarizer=summarizer,
        )

    def generate_todays_brief(self):
        today = self.clock().in_timezone(self.tz).date()
        return self.briefs.generate_brief_for_date(today)

    def run_job(self, name: str) -> bool:
        """
        Run one job if it is not already running.

        Failures are logged, never raised, so the next trigger retries.

        Returns:
            True if the job ran to completion
        """
        lock = self._locks[name]
        if not lock.acquire(blocking=False):
            logger.warning("Skipping %s run, previous run still in progress", name)
            return False
        try:
            logger.info("Starting %s job", name)
            result = self._jobs[name]()
            logger.info("Finished %s job: %s", name, result)
            return True
        except Exception:
            logger.exception("Job %s failed", name)
            return False
        finally:
            lock.release()

    def run_initial_collection(self) -> None:
        """News then prices, once, before the schedule starts."""
        self.run_job("news")
        self.run_job("prices")

    def build_scheduler(self) -> Scheduler:
        scheduler = Scheduler(self.tz, clock=self.clock)
        scheduler.add_job("news", IntervalTrigger(self.schedule.news_interval_minutes))
        scheduler.add_job("prices", IntervalTrigger(self.schedule.price_interval_minutes))
        scheduler.add_job("brief", DailyTrigger(self.schedule.brief_hour))
        scheduler.add_job("metrics", DailyTrigger(self.schedule.metrics_hour))
        return scheduler

    def dispatch(self, name: str) -> threading.Thread:
        """Run a job on its own worker thread."""
        worker = threading.Thread(target=self.run_job, args=(name,), name=f"eiim-{name}")
        worker.start()
        self._workers = [w for w in self._workers if w.is_alive()]
        self._workers.append(worker)
        return worker

    def start(self) -> None:
        """Run the initial collection, then the schedule loop until stop()."""
        if self.schedule.run_on_start:
            self.run_initial_collection()

        scheduler = self.build_scheduler()
        logger.info("Scheduler started with %d jobs", len(scheduler.jobs))

        while not self._stop_event.is_set():
            for job in scheduler.due():
                self.dispatch(job.name)
            wait = scheduler.seconds_until_next()
            wait = self.schedule.poll_seconds if wait is None else min(wait, self.schedule.poll_seconds)
            self._stop_event.wait(max(wait, 0.5))

        logger.info("Scheduler stopped")
        self.join()

    def stop(self) -> None:
        self._stop_event.set()

    def join(self) -> None:
        """Wait for in-flight jobs to finish."""
        running = [w for w in self._workers if w.is_alive()]
        if running:
            logger.info("Waiting for %d running jobs", len(running))
        for worker in running:
            worker.join()

    def close(self) -> None:
        if self.metrics.context.client is not None:
            self.metrics.context.client.close()
        if self.gateway is not None:
            self.gateway.close()
