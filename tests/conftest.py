import pytest
import pytest_asyncio
from unittest.mock import MagicMock
import httpx
from datetime import datetime, timezone

from curio.config import Settings
from curio.models.article import RawArticle
from curio.news.identity import derive_article_id
from curio.news.services.category_service import CategoryService
from curio.news.services.fanout_service import ProcessedArticleService
from curio.news.services.feed_service import FeedService
from curio.news.services.notification_service import NotificationService
from curio.news.services.raw_article_service import RawArticleService

from tests.fakes import (
    FakeCategoryRepository,
    FakeCategoryTreeCache,
    FakeFeedRepository,
    FakeNotificationRepository,
    FakeProcessedArticleRepository,
    FakeRawArticleRepository,
)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        authentication_enabled=False,
        pipeline_api_key=None,
        feed_fetch_concurrency=4,
        feed_request_timeout_seconds=5.0,
    )


@pytest.fixture
def raw_repo():
    return FakeRawArticleRepository()


@pytest.fixture
def processed_repo(raw_repo):
    return FakeProcessedArticleRepository(raw_repo)


@pytest.fixture
def feed_repo():
    return FakeFeedRepository()


@pytest.fixture
def category_repo():
    return FakeCategoryRepository()


@pytest.fixture
def tree_cache():
    return FakeCategoryTreeCache()


@pytest.fixture
def notification_repo():
    return FakeNotificationRepository()


@pytest.fixture
def category_service(category_repo, tree_cache):
    return CategoryService(category_repo, tree_cache)


@pytest.fixture
def processed_article_service(raw_repo, processed_repo):
    return ProcessedArticleService(raw_repo, processed_repo, batch_size=100, embedding_dimensions=384)


@pytest.fixture
def raw_article_service(raw_repo):
    return RawArticleService(raw_repo, retention_days=30, max_limit=50)


@pytest.fixture
def make_raw_article():
    def _make(link: str, timestamp: datetime = None, is_processed: bool = False, title: str = "Headline"):
        return RawArticle(
            id=derive_article_id(link),
            source="Example Wire",
            title=title,
            timestamp=timestamp or datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc),
            link=link,
            summary="Summary text",
            is_processed=is_processed,
        )
    return _make


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest_asyncio.fixture
async def async_client(
    mock_db,
    raw_article_service,
    processed_article_service,
    category_service,
    feed_repo,
    notification_repo,
):
    from curio.main import app
    from curio.api import dependencies

    app.dependency_overrides[dependencies.get_db] = lambda: mock_db
    app.dependency_overrides[dependencies.get_raw_article_service] = lambda: raw_article_service
    app.dependency_overrides[dependencies.get_processed_article_service] = lambda: processed_article_service
    app.dependency_overrides[dependencies.get_category_service] = lambda: category_service
    app.dependency_overrides[dependencies.get_feed_service] = lambda: FeedService(feed_repo)
    app.dependency_overrides[dependencies.get_notification_service] = lambda: NotificationService(notification_repo)
    app.dependency_overrides[dependencies.require_admin] = lambda: {"uid": "admin-user", "admin": True}

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
