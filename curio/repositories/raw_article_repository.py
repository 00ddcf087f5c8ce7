from datetime import datetime
from typing import Iterable, List, Sequence, Set

from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore
from google.cloud.firestore import AsyncClient
from google.cloud.firestore_v1.base_query import FieldFilter

from ..models.article import RawArticle
from .collections import Collections


class RawArticleRepository:
    def __init__(self, client: AsyncClient):
        self.client = client
        self.collection = client.collection(Collections.RAW_NEWS)

    async def create(self, article: RawArticle) -> bool:
        """Create-if-absent. Returns False when the id is already ingested."""
        try:
            await self.collection.document(article.id).create(article.to_document())
            return True
        except AlreadyExists:
            return False

    async def list_unprocessed(self, since: datetime, limit: int) -> List[RawArticle]:
        # Needs the composite index (isProcessed ASC, timestamp ASC)
        query = (
            self.collection
            .where(filter=FieldFilter("isProcessed", "==", False))
            .where(filter=FieldFilter("timestamp", ">=", since))
            .order_by("timestamp", direction=firestore.Query.ASCENDING)
            .limit(limit)
        )
        return [RawArticle.from_document(doc.id, doc.to_dict() or {}) async for doc in query.stream()]

    async def list_ids_older_than(self, cutoff: datetime) -> List[str]:
        query = self.collection.where(filter=FieldFilter("timestamp", "<", cutoff))
        return [doc.id async for doc in query.stream()]

    async def delete_many(self, article_ids: Sequence[str]) -> int:
        """Delete the given ids in a single atomic batch"""
        batch = self.client.batch()
        for article_id in article_ids:
            batch.delete(self.collection.document(article_id))
        await batch.commit()
        return len(article_ids)

    async def existing_ids(self, article_ids: Iterable[str]) -> Set[str]:
        refs = [self.collection.document(article_id) for article_id in set(article_ids)]
        if not refs:
            return set()

        found = set()
        async for snapshot in self.client.get_all(refs, field_paths=["isProcessed"]):
            if snapshot.exists:
                found.add(snapshot.id)
        return found
