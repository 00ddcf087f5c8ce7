import pytest
import httpx
from datetime import datetime, timezone

from curio.exceptions import FeedFetchError
from curio.models.feed import FeedSource
from curio.news.identity import derive_article_id
from curio.news.services.feed_fetcher import FeedFetcherService

from tests.fakes import FakeFeedRepository

WORLD_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>World Wire</title>
    <link>https://world.example.com</link>
    <description>World news</description>
    <item>
      <title>Summit opens</title>
      <link>https://world.example.com/summit</link>
      <description>&lt;p&gt;Leaders &lt;b&gt;meet&lt;/b&gt; today.&lt;/p&gt;</description>
      <pubDate>Mon, 19 Oct 2026 08:30:00 GMT</pubDate>
    </item>
    <item>
      <link>https://world.example.com/untitled</link>
      <description>No title here</description>
    </item>
    <item>
      <title>Missing link</title>
      <description>Dropped</description>
    </item>
  </channel>
</rss>
"""

TECH_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Tech Daily</title>
    <item>
      <title>Chip launch</title>
      <link>https://tech.example.com/chip</link>
      <description>New chip</description>
      <pubDate>Sun, 18 Oct 2026 22:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>
"""


def make_transport(routes):
    def handler(request: httpx.Request) -> httpx.Response:
        body = routes.get(str(request.url))
        if body is None:
            return httpx.Response(404, content=b"not found")
        if isinstance(body, int):
            return httpx.Response(body, content=b"error")
        return httpx.Response(200, content=body, headers={"Content-Type": "application/rss+xml"})
    return httpx.MockTransport(handler)


@pytest.fixture
def feeds():
    return [
        FeedSource(id="world", name="World Wire", feed_url="https://world.example.com/rss"),
        FeedSource(id="tech", name="Tech Daily", feed_url="https://tech.example.com/rss"),
    ]


@pytest.fixture
def routes():
    return {
        "https://world.example.com/rss": WORLD_FEED,
        "https://tech.example.com/rss": TECH_FEED,
    }


def build_service(feed_repo, raw_repo, settings, routes):
    client = httpx.AsyncClient(transport=make_transport(routes))
    return FeedFetcherService(feed_repo, raw_repo, settings=settings, http_client=client)


class TestFeedFetcherService:
    @pytest.mark.asyncio
    async def test_ingests_items_with_links(self, feeds, routes, raw_repo, settings):
        service = build_service(FakeFeedRepository(feeds), raw_repo, settings, routes)

        stats = await service.run()

        assert stats.feeds_total == 2
        assert stats.feeds_succeeded == 2
        assert stats.items_seen == 4
        assert stats.articles_created == 3
        assert len(raw_repo.articles) == 3

        summit = raw_repo.articles[derive_article_id("https://world.example.com/summit")]
        assert summit.source == "World Wire"
        assert summit.title == "Summit opens"
        assert summit.summary == "Leaders meet today."
        assert summit.timestamp == datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)
        assert summit.is_processed is False

    @pytest.mark.asyncio
    async def test_missing_title_defaults(self, feeds, routes, raw_repo, settings):
        service = build_service(FakeFeedRepository(feeds), raw_repo, settings, routes)

        await service.run()

        untitled = raw_repo.articles[derive_article_id("https://world.example.com/untitled")]
        assert untitled.title == "No Title"
        # No pubDate: stamped with the fetch time
        assert untitled.timestamp.tzinfo is not None

    @pytest.mark.asyncio
    async def test_second_run_creates_nothing(self, feeds, routes, raw_repo, settings):
        service = build_service(FakeFeedRepository(feeds), raw_repo, settings, routes)

        await service.run()
        stored = {article_id: article.title for article_id, article in raw_repo.articles.items()}
        stats = await service.run()

        assert stats.articles_created == 0
        assert stats.duplicates == 3
        assert {article_id: article.title for article_id, article in raw_repo.articles.items()} == stored

    @pytest.mark.asyncio
    async def test_existing_article_is_not_overwritten(self, feeds, routes, raw_repo, settings, make_raw_article):
        existing = make_raw_article("https://tech.example.com/chip", is_processed=True, title="Edited title")
        raw_repo.add(existing)
        service = build_service(FakeFeedRepository(feeds), raw_repo, settings, routes)

        await service.run()

        article = raw_repo.articles[existing.id]
        assert article.title == "Edited title"
        assert article.is_processed is True

    @pytest.mark.asyncio
    async def test_failing_feed_is_skipped(self, feeds, routes, raw_repo, settings):
        routes["https://world.example.com/rss"] = 503
        service = build_service(FakeFeedRepository(feeds), raw_repo, settings, routes)

        stats = await service.run()

        assert stats.feeds_failed == 1
        assert stats.feeds_succeeded == 1
        assert list(raw_repo.articles) == [derive_article_id("https://tech.example.com/chip")]

    @pytest.mark.asyncio
    async def test_unparseable_feed_is_skipped(self, feeds, routes, raw_repo, settings):
        routes["https://world.example.com/rss"] = b"<html><body>this is not a feed"
        service = build_service(FakeFeedRepository(feeds), raw_repo, settings, routes)

        stats = await service.run()

        assert stats.feeds_failed == 1
        assert stats.articles_created == 1

    @pytest.mark.asyncio
    async def test_disabled_and_urlless_feeds(self, routes, raw_repo, settings):
        feeds = [
            FeedSource(id="world", name="World Wire", feed_url="https://world.example.com/rss", enabled=False),
            FeedSource(id="empty", name="No URL", feed_url=""),
            FeedSource(id="tech", name="Tech Daily", feed_url="https://tech.example.com/rss"),
        ]
        service = build_service(FakeFeedRepository(feeds), raw_repo, settings, routes)

        stats = await service.run()

        assert stats.feeds_total == 2
        assert stats.feeds_skipped == 1
        assert stats.feeds_succeeded == 1
        assert stats.articles_created == 1

    @pytest.mark.asyncio
    async def test_item_write_error_is_counted(self, feeds, routes, raw_repo, settings):
        raw_repo.failing_links.add("https://world.example.com/summit")
        service = build_service(FakeFeedRepository(feeds), raw_repo, settings, routes)

        stats = await service.run()

        assert stats.item_errors == 1
        assert stats.articles_created == 2
        assert stats.feeds_failed == 0

    @pytest.mark.asyncio
    async def test_unnamed_feed_uses_default_source(self, routes, raw_repo, settings):
        feeds = [FeedSource(id="tech", name="", feed_url="https://tech.example.com/rss")]
        service = build_service(FakeFeedRepository(feeds), raw_repo, settings, routes)

        await service.run()

        article = raw_repo.articles[derive_article_id("https://tech.example.com/chip")]
        assert article.source == "Unknown"

    @pytest.mark.asyncio
    async def test_fetch_entries_raises_on_http_error(self, raw_repo, settings):
        service = build_service(FakeFeedRepository(), raw_repo, settings, {})

        with pytest.raises(FeedFetchError) as exc_info:
            await service.fetch_entries(service.http_client, "https://missing.example.com/rss")

        assert "404" in exc_info.value.message
