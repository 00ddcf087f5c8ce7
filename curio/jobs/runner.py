"""
Entry points for the two scheduled jobs: the hourly feed fetch and the daily
raw-article cleanup. Each run is self-contained, bounded by its execution
budget, and never raises; failures are logged and reported as ``None``.
"""

import asyncio
from typing import Any, Dict, Optional

import structlog
from google.cloud.firestore import AsyncClient

from ..config import Settings, get_settings
from ..core.firebase import get_firestore_client
from ..news.services.feed_fetcher import FeedFetcherService
from ..news.services.retention_sweeper import RetentionSweeper
from ..repositories.feed_repository import FeedRepository
from ..repositories.raw_article_repository import RawArticleRepository

logger = structlog.get_logger(__name__)

FETCH_FEEDS = "fetch-feeds"
CLEANUP = "cleanup"


async def run_fetch_job(client: Optional[AsyncClient] = None, settings: Optional[Settings] = None) -> Optional[Dict[str, Any]]:
    settings = settings or get_settings()
    try:
        client = client or get_firestore_client()
        service = FeedFetcherService(FeedRepository(client), RawArticleRepository(client), settings)
        stats = await asyncio.wait_for(service.run(), timeout=settings.fetch_job_timeout_seconds)
    except asyncio.TimeoutError:
        logger.error("Feed fetch job timed out", timeout_seconds=settings.fetch_job_timeout_seconds)
        return None
    except Exception as e:
        logger.error("Error in feed fetch job", error=str(e), exc_info=e)
        return None
    return stats.to_dict()


async def run_cleanup_job(client: Optional[AsyncClient] = None, settings: Optional[Settings] = None) -> Optional[Dict[str, Any]]:
    settings = settings or get_settings()
    try:
        client = client or get_firestore_client()
        sweeper = RetentionSweeper(
            RawArticleRepository(client),
            retention_days=settings.raw_article_retention_days,
            batch_size=settings.cleanup_batch_size,
        )
        result = await asyncio.wait_for(sweeper.run(), timeout=settings.cleanup_job_timeout_seconds)
    except asyncio.TimeoutError:
        logger.error("Cleanup job timed out", timeout_seconds=settings.cleanup_job_timeout_seconds)
        return None
    except Exception as e:
        logger.error("Error in cleanup job", error=str(e), exc_info=e)
        return None
    return {
        "cutoff": result.cutoff.isoformat(),
        "matched": result.matched,
        "deleted": result.deleted,
        "batches": result.batches,
        "completed": result.completed,
    }


JOBS = {
    FETCH_FEEDS: run_fetch_job,
    CLEANUP: run_cleanup_job,
}
