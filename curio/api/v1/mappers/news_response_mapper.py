from ....models.article import ProcessedArticle, RawArticle
from ....models.feed import FeedSource
from ....models.notification import Notification
from ....news.schemas.responses import (
    CategoryResponse,
    FeedResponse,
    NotificationResponse,
    ProcessedArticleItem,
    RawArticleItem,
)


class NewsResponseMapper:
    """Maps stored documents to API response models"""

    @staticmethod
    def raw_article(article: RawArticle) -> RawArticleItem:
        return RawArticleItem(
            id=article.id,
            link=article.link,
            source=article.source,
            summary=article.summary,
            title=article.title,
            timestamp=article.timestamp.isoformat(),
        )

    @staticmethod
    def processed_article(article: ProcessedArticle) -> ProcessedArticleItem:
        return ProcessedArticleItem(
            id=article.id,
            category_id=article.category_id,
            title=article.title,
            link=article.link,
            source=article.source,
            timestamp=article.timestamp,
            original_summary=article.original_summary,
            generated_summary=article.generated_summary,
            categories=article.categories,
            processed_at=article.processed_at,
        )

    @staticmethod
    def feed(feed: FeedSource) -> FeedResponse:
        return FeedResponse(
            id=feed.id,
            name=feed.name,
            url=feed.feed_url,
            enabled=feed.enabled,
            category_id=feed.category_id,
        )

    @staticmethod
    def category(category) -> CategoryResponse:
        # Works for both Category and Subcategory
        return CategoryResponse(id=category.id, name=category.name, slug=category.slug)

    @staticmethod
    def notification(notification: Notification) -> NotificationResponse:
        return NotificationResponse(
            id=notification.id,
            title=notification.title,
            body=notification.body,
            target_category_id=notification.target_category_id,
            sent_at=notification.sent_at,
        )
