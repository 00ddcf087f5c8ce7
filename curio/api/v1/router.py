from fastapi import APIRouter

from .endpoints import health, raw_articles, processed_articles, categories, feeds, notifications, jobs

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])

# AI pipeline (X-API-Key when configured)
api_router.include_router(raw_articles.router, prefix="/raw-articles", tags=["pipeline"])
api_router.include_router(processed_articles.router, prefix="/processed-articles", tags=["pipeline"])

# Client reads + admin category management
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])

# Admin
api_router.include_router(feeds.router, prefix="/feeds", tags=["admin-feeds"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["admin-notifications"])

# Scheduler triggers
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
