from typing import List

from fastapi import APIRouter, Depends, Response

from ...dependencies import get_feed_service, require_admin
from ..mappers.news_response_mapper import NewsResponseMapper
from ....news.schemas.requests import FeedCreateRequest, FeedUpdateRequest
from ....news.schemas.responses import FeedResponse
from ....news.services.feed_service import FeedService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=List[FeedResponse])
async def list_feeds(feed_service: FeedService = Depends(get_feed_service)):
    feeds = await feed_service.list_feeds()
    return [NewsResponseMapper.feed(feed) for feed in feeds]


@router.post("", response_model=FeedResponse, status_code=201)
async def create_feed(request: FeedCreateRequest, feed_service: FeedService = Depends(get_feed_service)):
    feed = await feed_service.create_feed(
        request.name, request.url, enabled=request.enabled, category_id=request.category_id
    )
    return NewsResponseMapper.feed(feed)


@router.patch("/{feed_id}", response_model=FeedResponse)
async def update_feed(
    feed_id: str,
    request: FeedUpdateRequest,
    feed_service: FeedService = Depends(get_feed_service),
):
    feed = await feed_service.update_feed(
        feed_id,
        name=request.name,
        url=request.url,
        enabled=request.enabled,
        category_id=request.category_id,
    )
    return NewsResponseMapper.feed(feed)


@router.delete("/{feed_id}", status_code=204)
async def delete_feed(feed_id: str, feed_service: FeedService = Depends(get_feed_service)):
    await feed_service.delete_feed(feed_id)
    return Response(status_code=204)
