from fastapi import APIRouter, Depends
from google.cloud.firestore import AsyncClient

from ...dependencies import get_db, verify_pipeline_key
from ....jobs.runner import CLEANUP, FETCH_FEEDS, run_cleanup_job, run_fetch_job
from ....news.schemas.responses import JobRunResponse

router = APIRouter(dependencies=[Depends(verify_pipeline_key)])


@router.post("/fetch-feeds", response_model=JobRunResponse)
async def trigger_fetch_feeds(db: AsyncClient = Depends(get_db)):
    """Run one feed fetch pass (for Cloud Scheduler or cron)"""
    stats = await run_fetch_job(db)
    return JobRunResponse(job=FETCH_FEEDS, success=stats is not None, stats=stats)


@router.post("/cleanup", response_model=JobRunResponse)
async def trigger_cleanup(db: AsyncClient = Depends(get_db)):
    """Run one raw article retention sweep"""
    stats = await run_cleanup_job(db)
    return JobRunResponse(job=CLEANUP, success=stats is not None, stats=stats)
