"""Feed fetcher."""

import calendar
import logging
from datetime import datetime, timezone
from typing import Optional

import feedparser
import httpx

from .models import FeedItem, FeedResult

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "EIIM/1.0 (+https://eiim.app)"


class FeedFetcher:
    """Fetch and parse syndication feeds."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Initialize feed fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: Identifying User-Agent header
            client: Preconfigured client (tests pass one with a mock transport)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.client = client

    def _parse_date(self, entry) -> Optional[datetime]:
        """feedparser time tuples are UTC."""
        for field in ("published_parsed", "updated_parsed"):
            parsed = entry.get(field)
            if parsed:
                try:
                    return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
                except (OverflowError, ValueError):
                    continue
        return None

    def _entry_content(self, entry) -> Optional[str]:
        contents = entry.get("content")
        if contents:
            return "\n".join(c.get("value", "") for c in contents)
        return None

    def parse(self, text: str, source_name: str, source_url: str) -> FeedResult:
        """Parse feed text into items."""
        feed = feedparser.parse(text)

        if feed.bozo and not feed.entries:
            return FeedResult(
                source_name=source_name,
                source_url=source_url,
                success=False,
                error=f"Invalid feed: {feed.bozo_exception}",
            )

        items = []
        for entry in feed.entries:
            link = entry.get("link")
            if not link:
                continue
            items.append(FeedItem(
                title=entry.get("title", ""),
                link=link,
                published=self._parse_date(entry),
                content=self._entry_content(entry),
                summary=entry.get("summary") or entry.get("description"),
                source_name=source_name,
            ))

        return FeedResult(
            source_name=source_name,
            source_url=source_url,
            success=True,
            items=items,
            item_count=len(items),
        )

    def fetch_feed(self, source_name: str, url: str) -> FeedResult:
        """Fetch and parse a single feed; errors are returned, not raised."""
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
        }
        try:
            if self.client is not None:
                response = self.client.get(url, headers=headers, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                    response = client.get(url, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return FeedResult(
                source_name=source_name,
                source_url=url,
                success=False,
                error=f"HTTP {e.response.status_code}",
            )
        except httpx.TimeoutException:
            return FeedResult(
                source_name=source_name,
                source_url=url,
                success=False,
                error="Request timed out",
            )
        except httpx.HTTPError as e:
            return FeedResult(
                source_name=source_name,
                source_url=url,
                success=False,
                error=f"HTTP error: {e}",
            )

        return self.parse(response.text, source_name, url)
