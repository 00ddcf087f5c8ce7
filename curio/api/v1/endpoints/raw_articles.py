from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ...dependencies import get_raw_article_service, verify_pipeline_key
from ..mappers.news_response_mapper import NewsResponseMapper
from ....news.schemas.responses import RawArticleListResponse
from ....news.services.raw_article_service import RawArticleService

logger = structlog.get_logger(__name__)

router = APIRouter(dependencies=[Depends(verify_pipeline_key)])


@router.get("", response_model=RawArticleListResponse)
async def get_raw_articles(
    limit: Optional[int] = Query(None, ge=1, description="Number of articles (capped at the configured maximum)"),
    raw_article_service: RawArticleService = Depends(get_raw_article_service),
):
    """Oldest unprocessed raw articles, for the AI pipeline"""
    try:
        articles = await raw_article_service.list_unprocessed(limit)
    except Exception as e:
        logger.error("Error fetching raw news articles", error=str(e), exc_info=e)
        return JSONResponse(status_code=500, content={"error": "Failed to fetch raw news articles"})

    items = [NewsResponseMapper.raw_article(article) for article in articles]
    return RawArticleListResponse(articles=items, count=len(items))
