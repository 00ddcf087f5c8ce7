from .article import RawArticle, ProcessedArticle, MarkProcessed, StoreProcessedCopy, FanoutWrite
from .category import Category, Subcategory
from .feed import FeedSource
from .notification import Notification

__all__ = [
    "RawArticle", "ProcessedArticle", "MarkProcessed", "StoreProcessedCopy", "FanoutWrite",
    "Category", "Subcategory", "FeedSource", "Notification",
]
