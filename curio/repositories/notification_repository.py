from typing import List, Optional

from google.cloud import firestore
from google.cloud.firestore import AsyncClient

from ..models.notification import Notification
from .collections import Collections


class NotificationRepository:
    def __init__(self, client: AsyncClient):
        self.collection = client.collection(Collections.NOTIFICATIONS)

    async def list_recent(self, limit: int) -> List[Notification]:
        query = self.collection.order_by("sentAt", direction=firestore.Query.DESCENDING).limit(limit)
        return [Notification.from_document(doc.id, doc.to_dict() or {}) async for doc in query.stream()]

    async def create(self, title: str, body: str, target_category_id: Optional[str] = None) -> Notification:
        ref = self.collection.document()
        await ref.set({
            "title": title,
            "body": body,
            "targetCategoryId": target_category_id,
            "sentAt": firestore.SERVER_TIMESTAMP,
        })
        snapshot = await ref.get()
        return Notification.from_document(snapshot.id, snapshot.to_dict() or {})
