import json

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ...dependencies import get_processed_article_service, verify_pipeline_key
from ....exceptions import ValidationError
from ....news.schemas.responses import FanoutResponse
from ....news.services.fanout_service import ProcessedArticleService

logger = structlog.get_logger(__name__)

router = APIRouter(dependencies=[Depends(verify_pipeline_key)])


@router.post("", response_model=FanoutResponse)
async def receive_processed_articles(
    request: Request,
    service: ProcessedArticleService = Depends(get_processed_article_service),
):
    """
    Receive classified articles from the AI pipeline.

    The body is a single article object or a list of them. Each article is
    stored once per category in ``categories`` and its raw article is marked
    processed. Invalid entries are skipped.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse(status_code=400, content={"error": "Request body must be JSON"})

    try:
        result = await service.receive(payload)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": e.message})
    except Exception as e:
        logger.error("Error in receive_processed_articles", error=str(e), exc_info=e)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    return result.to_response()
