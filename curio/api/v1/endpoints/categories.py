import structlog
from fastapi import APIRouter, Depends, Query, Response

from ...dependencies import get_category_service, get_processed_article_service, require_admin, verify_pipeline_key
from ..mappers.news_response_mapper import NewsResponseMapper
from ....news.schemas.requests import CategoryCreateRequest, CategoryUpdateRequest
from ....news.schemas.responses import CategoryResponse, CategoryTreeResponse, ProcessedArticleListResponse
from ....news.services.category_service import CategoryService
from ....news.services.fanout_service import ProcessedArticleService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/tree", response_model=CategoryTreeResponse)
async def get_category_tree(category_service: CategoryService = Depends(get_category_service)):
    """Full category tree, served from the cache when present"""
    return await category_service.get_tree()


@router.get("/{category_id}/articles", response_model=ProcessedArticleListResponse)
async def get_category_articles(
    category_id: str,
    limit: int = Query(20, ge=1, le=100, description="Number of articles (max 100)"),
    service: ProcessedArticleService = Depends(get_processed_article_service),
):
    """Processed articles filed under a category or subcategory, newest first"""
    articles = await service.list_for_category(category_id, limit)
    items = [NewsResponseMapper.processed_article(article) for article in articles]
    return ProcessedArticleListResponse(category_id=category_id, articles=items, count=len(items))


@router.post("/cache/invalidate", status_code=204, dependencies=[Depends(verify_pipeline_key)])
async def invalidate_category_cache(category_service: CategoryService = Depends(get_category_service)):
    """Hook for category writes made outside this API (console, client SDK, triggers)"""
    await category_service.invalidate_cache("external write")
    return Response(status_code=204)


# =============================================================================
# ADMIN
# =============================================================================

@router.post("", response_model=CategoryResponse, status_code=201, dependencies=[Depends(require_admin)])
async def create_category(
    request: CategoryCreateRequest,
    category_service: CategoryService = Depends(get_category_service),
):
    category = await category_service.create_category(request.name, slug=request.slug, category_id=request.id)
    return NewsResponseMapper.category(category)


@router.patch("/{category_id}", response_model=CategoryResponse, dependencies=[Depends(require_admin)])
async def update_category(
    category_id: str,
    request: CategoryUpdateRequest,
    category_service: CategoryService = Depends(get_category_service),
):
    category = await category_service.update_category(category_id, name=request.name, slug=request.slug)
    return NewsResponseMapper.category(category)


@router.delete("/{category_id}", status_code=204, dependencies=[Depends(require_admin)])
async def delete_category(
    category_id: str,
    category_service: CategoryService = Depends(get_category_service),
):
    """Deletes the category and all of its subcategories"""
    await category_service.delete_category(category_id)
    return Response(status_code=204)


@router.post(
    "/{category_id}/subcategories",
    response_model=CategoryResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_subcategory(
    category_id: str,
    request: CategoryCreateRequest,
    category_service: CategoryService = Depends(get_category_service),
):
    subcategory = await category_service.create_subcategory(
        category_id, request.name, slug=request.slug, subcategory_id=request.id
    )
    return NewsResponseMapper.category(subcategory)


@router.patch(
    "/{category_id}/subcategories/{subcategory_id}",
    response_model=CategoryResponse,
    dependencies=[Depends(require_admin)],
)
async def update_subcategory(
    category_id: str,
    subcategory_id: str,
    request: CategoryUpdateRequest,
    category_service: CategoryService = Depends(get_category_service),
):
    subcategory = await category_service.update_subcategory(
        category_id, subcategory_id, name=request.name, slug=request.slug
    )
    return NewsResponseMapper.category(subcategory)


@router.delete(
    "/{category_id}/subcategories/{subcategory_id}",
    status_code=204,
    dependencies=[Depends(require_admin)],
)
async def delete_subcategory(
    category_id: str,
    subcategory_id: str,
    category_service: CategoryService = Depends(get_category_service),
):
    await category_service.delete_subcategory(category_id, subcategory_id)
    return Response(status_code=204)
