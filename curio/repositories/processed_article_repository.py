from typing import List, Sequence

from google.cloud import firestore
from google.cloud.firestore import AsyncClient

from ..models.article import FanoutWrite, MarkProcessed, ProcessedArticle
from .collections import Collections


class ProcessedArticleRepository:
    def __init__(self, client: AsyncClient):
        self.client = client

    def _articles(self, category_id: str):
        return (
            self.client.collection(Collections.PROCESSED_ARTICLES)
            .document(category_id)
            .collection(Collections.ARTICLES)
        )

    async def commit_writes(self, writes: Sequence[FanoutWrite]) -> None:
        """Apply one group of fan-out writes as a single atomic batch"""
        batch = self.client.batch()
        for write in writes:
            if isinstance(write, MarkProcessed):
                raw_ref = self.client.collection(Collections.RAW_NEWS).document(write.article_id)
                batch.update(raw_ref, {"isProcessed": True})
            else:
                batch.set(
                    self._articles(write.category_id).document(write.article_id),
                    {**write.document, "processedAt": firestore.SERVER_TIMESTAMP},
                )
        await batch.commit()

    async def list_by_category(self, category_id: str, limit: int) -> List[ProcessedArticle]:
        query = (
            self._articles(category_id)
            .order_by("timestamp", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return [
            ProcessedArticle.from_document(category_id, doc.id, doc.to_dict() or {})
            async for doc in query.stream()
        ]
