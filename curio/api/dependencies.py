import secrets
from typing import Any, Dict, Optional

import structlog
from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from google.cloud.firestore import AsyncClient

from ..config import get_settings
from ..core.firebase import get_firestore_client, verify_firebase_token
from ..news.services.category_service import CategoryService
from ..news.services.fanout_service import ProcessedArticleService
from ..news.services.feed_service import FeedService
from ..news.services.notification_service import NotificationService
from ..news.services.raw_article_service import RawArticleService
from ..repositories import (
    CategoryRepository,
    CategoryTreeCache,
    FeedRepository,
    NotificationRepository,
    ProcessedArticleRepository,
    RawArticleRepository,
    UserProfileRepository,
)

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)


def get_db() -> AsyncClient:
    return get_firestore_client()


def get_raw_article_service(db: AsyncClient = Depends(get_db)) -> RawArticleService:
    settings = get_settings()
    return RawArticleService(
        RawArticleRepository(db),
        retention_days=settings.raw_article_retention_days,
        max_limit=settings.raw_article_query_limit,
    )


def get_processed_article_service(db: AsyncClient = Depends(get_db)) -> ProcessedArticleService:
    settings = get_settings()
    return ProcessedArticleService(
        RawArticleRepository(db),
        ProcessedArticleRepository(db),
        batch_size=settings.fanout_batch_size,
        embedding_dimensions=settings.embedding_dimensions,
    )


def get_category_service(db: AsyncClient = Depends(get_db)) -> CategoryService:
    return CategoryService(CategoryRepository(db), CategoryTreeCache(db))


def get_feed_service(db: AsyncClient = Depends(get_db)) -> FeedService:
    return FeedService(FeedRepository(db))


def get_notification_service(db: AsyncClient = Depends(get_db)) -> NotificationService:
    return NotificationService(NotificationRepository(db))


def get_user_profile_repository(db: AsyncClient = Depends(get_db)) -> UserProfileRepository:
    return UserProfileRepository(db)


async def verify_pipeline_key(x_api_key: Optional[str] = Header(default=None)) -> None:
    """
    Guards machine-to-machine routes (AI pipeline, external schedulers).
    Open when no pipeline key is configured.
    """
    expected = get_settings().pipeline_api_key
    if not expected:
        return
    if not x_api_key or not secrets.compare_digest(x_api_key, expected):
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    user_profiles: UserProfileRepository = Depends(get_user_profile_repository),
) -> Dict[str, Any]:
    """
    Admin routes need a Firebase ID token whose user is an admin, either via
    an ``admin`` custom claim or ``user_profile/{uid}.is_admin``.
    """
    settings = get_settings()

    if not settings.authentication_enabled:
        return {"uid": "anonymous", "admin": True}

    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Authentication required. Please provide a valid Firebase token.")

    claims = verify_firebase_token(credentials.credentials)
    if not claims or not claims.get("uid"):
        raise HTTPException(status_code=401, detail="Invalid Firebase token")

    if claims.get("admin") is True or await user_profiles.is_admin(claims["uid"]):
        return claims

    logger.warning("Admin access denied", uid=claims["uid"])
    raise HTTPException(status_code=403, detail="Admin access required")
