import logging

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.api.deps import get_db, require_user
from app.core.exceptions import DependencyConfigError
from app.crud import crud_resume
from app.schemas.ResumeSchemas import RegenerateSectionRequest, RegenerateSectionResponse
from app.services.ai_service import regenerate_section
from app.services.auth_service import AuthUser

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/regenerate-section", response_model=RegenerateSectionResponse)
def regenerate_resume_section(
    payload: RegenerateSectionRequest,
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    """
    Rewrite one resume section for a job description.

    The result is returned, not saved; the client persists it with PATCH /api/resumes/{id}.
    """
    if crud_resume.get_owned_resume(db, payload.resumeId, user.id) is None:
        raise HTTPException(status_code=404, detail="Resume not found")

    try:
        content = regenerate_section(payload.sectionType, payload.currentContent, payload.jobDescription)
    except DependencyConfigError as e:
        logger.error("Section regeneration unavailable: %s", e)
        raise HTTPException(status_code=500, detail="Service configuration error")

    return RegenerateSectionResponse(content=content)
