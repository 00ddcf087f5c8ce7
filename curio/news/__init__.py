"""
News Module
===========

Feed ingestion and article lifecycle:
- Hourly RSS/Atom fetch into the raw article store (link-hash dedup)
- Daily retention sweep of raw articles
- Raw article hand-off to the external AI pipeline
- Fan-out of classified articles to every assigned category
- Cached category tree and admin category/feed/notification management
"""
