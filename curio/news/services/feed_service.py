from typing import Any, Dict, List, Optional

import structlog

from ...exceptions import ValidationError
from ...models.feed import FeedSource
from ...repositories.feed_repository import FeedRepository
from ...utils.url_utils import validate_url

logger = structlog.get_logger(__name__)


class FeedService:
    """Admin management of feed sources"""

    def __init__(self, feed_repository: FeedRepository):
        self.feed_repository = feed_repository

    async def list_feeds(self) -> List[FeedSource]:
        feeds = await self.feed_repository.list_all()
        return sorted(feeds, key=lambda feed: feed.name.casefold())

    async def create_feed(self, name: str, url: str, enabled: bool = True, category_id: Optional[str] = None) -> FeedSource:
        name = name.strip()
        if not name:
            raise ValidationError("Feed name is required")
        validate_url(url)
        feed = await self.feed_repository.create(name=name, feed_url=url, enabled=enabled, category_id=category_id)
        logger.info("Feed created", feed_id=feed.id, feed_name=feed.name)
        return feed

    async def update_feed(
        self,
        feed_id: str,
        name: Optional[str] = None,
        url: Optional[str] = None,
        enabled: Optional[bool] = None,
        category_id: Optional[str] = None,
    ) -> FeedSource:
        fields: Dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Feed name cannot be empty")
            fields["name"] = name.strip()
        if url is not None:
            validate_url(url)
            fields["feed"] = url
        if enabled is not None:
            fields["enabled"] = enabled
        if category_id is not None:
            fields["categoryId"] = category_id
        if not fields:
            raise ValidationError("Nothing to update")

        feed = await self.feed_repository.update(feed_id, fields)
        logger.info("Feed updated", feed_id=feed_id, fields=sorted(fields))
        return feed

    async def delete_feed(self, feed_id: str) -> None:
        # Already-ingested articles from this feed are kept
        await self.feed_repository.delete(feed_id)
        logger.info("Feed deleted", feed_id=feed_id)
