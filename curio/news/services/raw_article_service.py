from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ...models.article import RawArticle
from ...repositories.raw_article_repository import RawArticleRepository


class RawArticleService:
    """Read side of ``rawnews`` used by the external AI pipeline"""

    def __init__(self, raw_article_repository: RawArticleRepository, retention_days: int = 30, max_limit: int = 50):
        self.raw_article_repository = raw_article_repository
        self.retention_days = retention_days
        self.max_limit = max_limit

    async def list_unprocessed(self, limit: Optional[int] = None, now: Optional[datetime] = None) -> List[RawArticle]:
        """Oldest unprocessed articles still inside the retention window"""
        limit = max(1, min(limit or self.max_limit, self.max_limit))
        since = (now or datetime.now(timezone.utc)) - timedelta(days=self.retention_days)
        return await self.raw_article_repository.list_unprocessed(since, limit)
