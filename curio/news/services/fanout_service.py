"""
Processed Article Fan-out
Receives classified articles from the external AI pipeline and stores them:
1. Validate each submission (bad entries are skipped, not fatal)
2. Mark the matching raw article as processed
3. Write one copy of the article under every assigned category

Writes are grouped into fixed-size batches and committed in order. There is
no transaction across batches: when a batch fails, earlier batches stay
applied and the rest of the call is abandoned.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence, Tuple

import structlog
from pydantic import ValidationError as SchemaValidationError

from ...exceptions import BatchCommitError, ValidationError
from ...models.article import FanoutWrite, MarkProcessed, ProcessedArticle, StoreProcessedCopy
from ...repositories.processed_article_repository import ProcessedArticleRepository
from ...repositories.raw_article_repository import RawArticleRepository
from ...utils.batch_utils import chunked
from ..schemas.requests import ProcessedArticleSubmission

logger = structlog.get_logger(__name__)


@dataclass
class FanoutResult:
    articles_processed: int = 0
    locations_saved: int = 0
    skipped: int = 0
    missing_raw_articles: List[str] = field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "articlesProcessed": self.articles_processed,
            "totalLocationsSaved": self.locations_saved,
        }


class ProcessedArticleService:
    def __init__(
        self,
        raw_article_repository: RawArticleRepository,
        processed_article_repository: ProcessedArticleRepository,
        batch_size: int = 100,
        embedding_dimensions: int = 384,
    ):
        self.raw_article_repository = raw_article_repository
        self.processed_article_repository = processed_article_repository
        self.batch_size = batch_size
        self.embedding_dimensions = embedding_dimensions

    def parse_submissions(self, entries: Sequence[Any]) -> Tuple[List[ProcessedArticleSubmission], int]:
        submissions = []
        skipped = 0
        for index, entry in enumerate(entries):
            try:
                submission = ProcessedArticleSubmission.model_validate(entry)
            except SchemaValidationError as e:
                skipped += 1
                logger.warning(
                    "Skipping invalid article data",
                    index=index,
                    article_id=entry.get("id") if isinstance(entry, dict) else None,
                    errors=[error["msg"] for error in e.errors()],
                )
                continue

            # Stored as sent either way; a skipped article would stay unprocessed
            embedding = submission.summary_embedding
            if embedding is not None and (not isinstance(embedding, list) or len(embedding) != self.embedding_dimensions):
                logger.warning(
                    "Unexpected embedding shape, storing as sent",
                    index=index,
                    article_id=submission.id,
                    expected=self.embedding_dimensions,
                    actual=len(embedding) if isinstance(embedding, list) else type(embedding).__name__,
                )

            submissions.append(submission)
        return submissions, skipped

    async def receive(self, payload: Any) -> FanoutResult:
        """Accepts a single submission object or a list of them"""
        entries = payload if isinstance(payload, list) else [payload]
        if not entries:
            raise ValidationError("Empty articles list")

        submissions, skipped = self.parse_submissions(entries)
        result = FanoutResult(skipped=skipped)

        existing = await self.raw_article_repository.existing_ids(s.id for s in submissions)
        received_at = datetime.now(timezone.utc)

        writes: List[FanoutWrite] = []
        for submission in submissions:
            if submission.id in existing:
                writes.append(MarkProcessed(article_id=submission.id))
            else:
                result.missing_raw_articles.append(submission.id)
                logger.warning("Raw article not found, category copies still written", article_id=submission.id)

            document = submission.to_document(received_at)
            for category_id in submission.categories:
                writes.append(StoreProcessedCopy(category_id=category_id, article_id=submission.id, document=document))
                result.locations_saved += 1
            result.articles_processed += 1

        await self._commit(writes)

        logger.info(
            "Successfully processed articles",
            articles=result.articles_processed,
            category_locations=result.locations_saved,
            skipped=result.skipped,
        )
        return result

    async def _commit(self, writes: Sequence[FanoutWrite]) -> None:
        committed_batches = 0
        committed_operations = 0
        for group in chunked(writes, self.batch_size):
            try:
                await self.processed_article_repository.commit_writes(group)
            except Exception as e:
                logger.error(
                    "Fan-out batch commit failed",
                    batch_index=committed_batches,
                    committed_operations=committed_operations,
                    total_operations=len(writes),
                    error=str(e),
                )
                raise BatchCommitError(
                    f"Batch {committed_batches} failed to commit",
                    committed_batches=committed_batches,
                    committed_operations=committed_operations,
                ) from e
            committed_batches += 1
            committed_operations += len(group)

    async def list_for_category(self, category_id: str, limit: int = 20) -> List[ProcessedArticle]:
        return await self.processed_article_repository.list_by_category(category_id, limit)
