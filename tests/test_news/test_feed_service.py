import pytest

from curio.exceptions import NotFoundError, ValidationError
from curio.news.services.feed_service import FeedService
from curio.news.services.notification_service import NotificationService


class TestFeedService:
    @pytest.fixture(autouse=True)
    def setup_service(self, feed_repo):
        self.repo = feed_repo
        self.service = FeedService(feed_repo)

    @pytest.mark.asyncio
    async def test_create_and_list_sorted(self):
        await self.service.create_feed("zeta news", "https://zeta.example.com/rss")
        await self.service.create_feed("Alpha Wire", "https://alpha.example.com/feed.xml", category_id="world")

        feeds = await self.service.list_feeds()

        assert [feed.name for feed in feeds] == ["Alpha Wire", "zeta news"]
        assert feeds[0].category_id == "world"
        assert feeds[0].enabled is True

    @pytest.mark.asyncio
    async def test_create_rejects_invalid_url(self):
        with pytest.raises(ValidationError):
            await self.service.create_feed("Broken", "not-a-url")

    @pytest.mark.asyncio
    async def test_disable_feed(self):
        feed = await self.service.create_feed("Alpha Wire", "https://alpha.example.com/rss")

        updated = await self.service.update_feed(feed.id, enabled=False)

        assert updated.enabled is False
        assert updated.feed_url == "https://alpha.example.com/rss"

    @pytest.mark.asyncio
    async def test_update_missing_feed(self):
        with pytest.raises(NotFoundError):
            await self.service.update_feed("nope", name="Renamed")

    @pytest.mark.asyncio
    async def test_update_needs_a_field(self):
        with pytest.raises(ValidationError):
            await self.service.update_feed("feed-1")

    @pytest.mark.asyncio
    async def test_delete_feed(self):
        feed = await self.service.create_feed("Alpha Wire", "https://alpha.example.com/rss")

        await self.service.delete_feed(feed.id)

        assert self.repo.feeds == {}


class TestNotificationService:
    @pytest.mark.asyncio
    async def test_send_and_list(self, notification_repo):
        service = NotificationService(notification_repo)

        sent = await service.send("  Breaking ", " Something happened ", target_category_id="world")
        recent = await service.list_recent()

        assert sent.title == "Breaking"
        assert sent.body == "Something happened"
        assert [notification.id for notification in recent] == [sent.id]
