"""
Feed Fetcher Service
Hourly ingestion of admin-configured RSS/Atom feeds into the raw article store:
1. Load enabled feeds
2. Fetch and parse every feed concurrently
3. Create-if-absent every item that has a link, keyed by the link hash

Re-fetching a feed is harmless: an item whose id already exists is counted
as a duplicate and left untouched.
"""

import asyncio
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import feedparser
import httpx
import structlog

from ...config import Settings, get_settings
from ...exceptions import FeedFetchError
from ...models.article import RawArticle
from ...models.feed import FeedSource
from ...repositories.feed_repository import FeedRepository
from ...repositories.raw_article_repository import RawArticleRepository
from ...utils.string_utils import strip_html
from ..identity import derive_article_id

logger = structlog.get_logger(__name__)

CREATED = "created"
DUPLICATE = "duplicate"
FAILED = "failed"


@dataclass
class FeedEntry:
    """Candidate article parsed from a feed, before identity is assigned"""
    title: str
    link: str
    summary: str
    published_at: datetime


@dataclass
class FeedIngestResult:
    feed_id: str
    feed_name: str
    items_seen: int = 0
    created: int = 0
    duplicates: int = 0
    errors: int = 0


@dataclass
class FetchRunStats:
    feeds_total: int = 0
    feeds_succeeded: int = 0
    feeds_failed: int = 0
    feeds_skipped: int = 0
    items_seen: int = 0
    articles_created: int = 0
    duplicates: int = 0
    item_errors: int = 0

    def add(self, result: FeedIngestResult) -> None:
        self.feeds_succeeded += 1
        self.items_seen += result.items_seen
        self.articles_created += result.created
        self.duplicates += result.duplicates
        self.item_errors += result.errors

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class FeedFetcherService:
    """Fetches every enabled feed and writes only-new items to ``rawnews``"""

    def __init__(
        self,
        feed_repository: FeedRepository,
        raw_article_repository: RawArticleRepository,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.feed_repository = feed_repository
        self.raw_article_repository = raw_article_repository
        self.settings = settings or get_settings()
        self.http_client = http_client

    async def run(self) -> FetchRunStats:
        if self.http_client is not None:
            return await self._run(self.http_client)

        async with httpx.AsyncClient(
            timeout=self.settings.feed_request_timeout_seconds,
            headers={"User-Agent": self.settings.feed_user_agent},
            follow_redirects=True,
        ) as client:
            return await self._run(client)

    async def _run(self, client: httpx.AsyncClient) -> FetchRunStats:
        feeds = [feed for feed in await self.feed_repository.list_all() if feed.enabled]
        stats = FetchRunStats(feeds_total=len(feeds))
        logger.info("Starting feed fetch", feeds=len(feeds))

        semaphore = asyncio.Semaphore(self.settings.feed_fetch_concurrency)

        async def bounded(feed: FeedSource):
            async with semaphore:
                return await self.ingest_feed(client, feed)

        results = await asyncio.gather(*(bounded(feed) for feed in feeds), return_exceptions=True)

        for feed, result in zip(feeds, results):
            if isinstance(result, FeedFetchError):
                stats.feeds_failed += 1
                logger.warning(
                    "Error fetching feed, skipping",
                    feed_id=feed.id,
                    feed_name=feed.name,
                    feed_url=feed.feed_url,
                    error=result.message,
                )
            elif isinstance(result, BaseException):
                stats.feeds_failed += 1
                logger.error(
                    "Unexpected error ingesting feed",
                    feed_id=feed.id,
                    feed_name=feed.name,
                    error=str(result),
                    exc_info=result,
                )
            elif result is None:
                stats.feeds_skipped += 1
            else:
                stats.add(result)

        logger.info("Finished fetching RSS feeds", **stats.to_dict())
        return stats

    async def ingest_feed(self, client: httpx.AsyncClient, feed: FeedSource) -> Optional[FeedIngestResult]:
        if not feed.feed_url:
            logger.warning("Feed URL missing, skipping", feed_id=feed.id, feed_name=feed.name or feed.id)
            return None

        source_name = feed.name or self.settings.default_source_name
        entries = await self.fetch_entries(client, feed.feed_url)
        result = FeedIngestResult(feed_id=feed.id, feed_name=source_name, items_seen=len(entries))

        outcomes = await asyncio.gather(
            *(self._create_article(entry, source_name) for entry in entries if entry.link),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if outcome == CREATED:
                result.created += 1
            elif outcome == DUPLICATE:
                result.duplicates += 1
            else:
                result.errors += 1

        logger.info(
            "Fetched feed",
            feed_name=source_name,
            items=result.items_seen,
            new_articles=result.created,
            duplicates=result.duplicates,
        )
        return result

    async def fetch_entries(self, client: httpx.AsyncClient, feed_url: str) -> List[FeedEntry]:
        try:
            response = await client.get(feed_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FeedFetchError(
                f"Feed returned HTTP {e.response.status_code}",
                details={"url": feed_url, "status_code": e.response.status_code},
            )
        except httpx.HTTPError as e:
            raise FeedFetchError(f"Failed to retrieve feed: {e}", details={"url": feed_url})

        parsed = feedparser.parse(response.content)
        if parsed.bozo and not parsed.entries:
            raise FeedFetchError(
                f"Failed to parse feed: {parsed.get('bozo_exception')}",
                details={"url": feed_url},
            )

        fetched_at = datetime.now(timezone.utc)
        return [self.parse_entry(entry, fetched_at) for entry in parsed.entries]

    def parse_entry(self, entry, fetched_at: datetime) -> FeedEntry:
        return FeedEntry(
            title=entry.get("title") or self.settings.default_article_title,
            link=entry.get("link") or "",
            summary=strip_html(entry.get("summary") or ""),
            published_at=_published_at(entry) or fetched_at,
        )

    async def _create_article(self, entry: FeedEntry, source_name: str) -> str:
        article = RawArticle(
            id=derive_article_id(entry.link),
            source=source_name,
            title=entry.title,
            timestamp=entry.published_at,
            link=entry.link,
            summary=entry.summary,
        )
        try:
            created = await self.raw_article_repository.create(article)
        except Exception as e:
            logger.error("Error adding article", title=entry.title, link=entry.link, error=str(e))
            return FAILED
        return CREATED if created else DUPLICATE


def _published_at(entry) -> Optional[datetime]:
    # feedparser normalizes parsed dates to UTC struct_time
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    try:
        return datetime(*parsed[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None
