from typing import List, Optional

import structlog

from ...models.notification import Notification
from ...repositories.notification_repository import NotificationRepository

logger = structlog.get_logger(__name__)


class NotificationService:
    def __init__(self, notification_repository: NotificationRepository):
        self.notification_repository = notification_repository

    async def list_recent(self, limit: int = 50) -> List[Notification]:
        return await self.notification_repository.list_recent(limit)

    async def send(self, title: str, body: str, target_category_id: Optional[str] = None) -> Notification:
        notification = await self.notification_repository.create(
            title=title.strip(),
            body=body.strip(),
            target_category_id=target_category_id,
        )
        logger.info(
            "Notification stored",
            notification_id=notification.id,
            target_category_id=target_category_id,
        )
        return notification
