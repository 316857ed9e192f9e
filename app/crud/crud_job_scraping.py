import logging
from datetime import datetime, timezone

from supabase import Client

from app.schemas.JobSchemas import JobScrapingRecord, JobScrapingResult

logger = logging.getLogger(__name__)


def record_job_scraping(db: Client, user_id: str, url: str, result: JobScrapingResult) -> bool:
    """Append a row to job_scrapings. Best-effort: failures are logged, not raised."""
    record = JobScrapingRecord(
        user_id=user_id,
        url=url,
        title=result.title,
        company=result.company,
        location=result.location,
        description=result.jobDescription,
        source=result.source,
        scraped_at=datetime.now(timezone.utc),
    )
    try:
        db.table("job_scrapings").insert(record.model_dump(mode="json")).execute()
    except Exception as e:
        logger.warning("Could not record job scraping for %s: %s", url, e)
        return False
    return True
