from typing import List

from fastapi import APIRouter, Depends, Query

from ...dependencies import get_notification_service, require_admin
from ..mappers.news_response_mapper import NewsResponseMapper
from ....news.schemas.requests import NotificationCreateRequest
from ....news.schemas.responses import NotificationResponse
from ....news.services.notification_service import NotificationService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    limit: int = Query(50, ge=1, le=200),
    notification_service: NotificationService = Depends(get_notification_service),
):
    notifications = await notification_service.list_recent(limit)
    return [NewsResponseMapper.notification(notification) for notification in notifications]


@router.post("", response_model=NotificationResponse, status_code=201)
async def send_notification(
    request: NotificationCreateRequest,
    notification_service: NotificationService = Depends(get_notification_service),
):
    notification = await notification_service.send(
        request.title, request.body, target_category_id=request.target_category_id
    )
    return NewsResponseMapper.notification(notification)
