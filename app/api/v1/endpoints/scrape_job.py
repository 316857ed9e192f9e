import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from starlette.concurrency import run_in_threadpool
from supabase import Client

from app.api.deps import get_db, require_user
from app.crud.crud_job_scraping import record_job_scraping
from app.schemas.JobSchemas import ScrapedJob, ScrapeJobRequest, ScrapeJobResponse
from app.services.analytics import capture_event
from app.services.auth_service import AuthUser
from app.services.job_scraper import scrape_job_description

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/scrape-job", response_model=ScrapeJobResponse)
async def scrape_job(
    payload: ScrapeJobRequest,
    background_tasks: BackgroundTasks,
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    """
    Scrape a job posting and return its title, company, location and description.

    Unreachable, blocked or content-free pages give a 422 with the reason.
    """
    result = await scrape_job_description(payload.url)
    if not result.success:
        logger.info("Scrape failed for user %s: %s", user.id, result.error)
        raise HTTPException(status_code=422, detail=result.error or "Failed to scrape job posting")

    await run_in_threadpool(record_job_scraping, db, user.id, payload.url, result)
    background_tasks.add_task(
        capture_event,
        "job_scraped",
        user.id,
        {"source": result.source, "url": payload.url},
    )

    return ScrapeJobResponse(
        data=ScrapedJob(
            title=result.title,
            company=result.company,
            location=result.location,
            jobDescription=result.jobDescription or "",
            source=result.source or "generic",
            url=payload.url,
        )
    )
