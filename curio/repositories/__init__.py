from .raw_article_repository import RawArticleRepository
from .processed_article_repository import ProcessedArticleRepository
from .feed_repository import FeedRepository
from .category_repository import CategoryRepository
from .cache_repository import CategoryTreeCache
from .notification_repository import NotificationRepository
from .user_profile_repository import UserProfileRepository

__all__ = [
    "RawArticleRepository", "ProcessedArticleRepository", "FeedRepository", "CategoryRepository",
    "CategoryTreeCache", "NotificationRepository", "UserProfileRepository",
]
