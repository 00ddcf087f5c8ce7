from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from ...repositories.raw_article_repository import RawArticleRepository
from ...utils.batch_utils import chunked

logger = structlog.get_logger(__name__)


@dataclass
class SweepResult:
    cutoff: datetime
    matched: int = 0
    deleted: int = 0
    batches: int = 0
    completed: bool = True


class RetentionSweeper:
    """
    Deletes raw articles older than the retention window, processed or not.

    Deletes are committed in sequential batches. A failed batch ends the run;
    the next run re-queries and picks up whatever is still too old.
    """

    def __init__(self, raw_article_repository: RawArticleRepository, retention_days: int = 30, batch_size: int = 500):
        self.raw_article_repository = raw_article_repository
        self.retention_days = retention_days
        self.batch_size = batch_size

    async def run(self, now: Optional[datetime] = None) -> SweepResult:
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(days=self.retention_days)
        logger.info("Starting cleanup of raw articles", cutoff=cutoff.isoformat())

        article_ids = await self.raw_article_repository.list_ids_older_than(cutoff)
        result = SweepResult(cutoff=cutoff, matched=len(article_ids))

        if not article_ids:
            logger.info("No old raw articles to delete")
            return result

        for group in chunked(article_ids, self.batch_size):
            try:
                result.deleted += await self.raw_article_repository.delete_many(group)
            except Exception as e:
                result.completed = False
                logger.error(
                    "Cleanup batch commit failed, ending run",
                    batch_index=result.batches,
                    deleted_so_far=result.deleted,
                    remaining=result.matched - result.deleted,
                    error=str(e),
                )
                break
            result.batches += 1
            logger.info("Deleted batch of raw articles", count=len(group))

        logger.info("Cleanup complete", total_deleted=result.deleted, completed=result.completed)
        return result
