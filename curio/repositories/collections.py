class Collections:
    FEEDS = "feeds"
    CATEGORIES = "categories"
    SUBCATEGORIES = "subcategories"
    RAW_NEWS = "rawnews"
    PROCESSED_ARTICLES = "processed_articles"
    ARTICLES = "articles"
    CACHE = "cache"
    NOTIFICATIONS = "notifications"
    USER_PROFILE = "user_profile"


CATEGORY_TREE_CACHE_ID = "categoryTree"
