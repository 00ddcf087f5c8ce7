from typing import Any, Dict, List, Optional

from google.api_core.exceptions import NotFound
from google.cloud.firestore import AsyncClient

from ..exceptions import NotFoundError
from ..models.feed import FeedSource
from .collections import Collections


class FeedRepository:
    def __init__(self, client: AsyncClient):
        self.client = client
        self.collection = client.collection(Collections.FEEDS)

    async def list_all(self) -> List[FeedSource]:
        return [FeedSource.from_document(doc.id, doc.to_dict() or {}) async for doc in self.collection.stream()]

    async def get(self, feed_id: str) -> Optional[FeedSource]:
        snapshot = await self.collection.document(feed_id).get()
        if not snapshot.exists:
            return None
        return FeedSource.from_document(snapshot.id, snapshot.to_dict() or {})

    async def create(self, name: str, feed_url: str, enabled: bool = True, category_id: Optional[str] = None) -> FeedSource:
        ref = self.collection.document()
        feed = FeedSource(id=ref.id, name=name, feed_url=feed_url, enabled=enabled, category_id=category_id)
        await ref.set(feed.to_document())
        return feed

    async def update(self, feed_id: str, fields: Dict[str, Any]) -> FeedSource:
        ref = self.collection.document(feed_id)
        try:
            await ref.update(fields)
        except NotFound:
            raise NotFoundError(f"Feed {feed_id} not found", details={"feed_id": feed_id})
        snapshot = await ref.get()
        return FeedSource.from_document(snapshot.id, snapshot.to_dict() or {})

    async def delete(self, feed_id: str) -> None:
        ref = self.collection.document(feed_id)
        snapshot = await ref.get()
        if not snapshot.exists:
            raise NotFoundError(f"Feed {feed_id} not found", details={"feed_id": feed_id})
        await ref.delete()
