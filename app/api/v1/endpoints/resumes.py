from fastapi import APIRouter, Depends, HTTPException, Query
from supabase import Client

from app.api.deps import get_db, require_user
from app.core.exceptions import ResumeContentError
from app.crud import crud_resume
from app.schemas.ResumeSchemas import (
    ResumeCreate,
    ResumeListResponse,
    ResumeMatchRequest,
    ResumeMatchResponse,
    ResumeSingleResponse,
    ResumeUpdate,
)
from app.services.auth_service import AuthUser
from app.services.keyword_analysis import match_resume
from app.services.resume_normalization import parse_resume_content

router = APIRouter()


@router.get("", response_model=ResumeListResponse)
def read_resumes(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    resumes = crud_resume.get_resumes(db, user.id, skip=skip, limit=limit)
    return ResumeListResponse(data=resumes)


@router.post("", response_model=ResumeSingleResponse, status_code=201)
def create_resume(
    resume_in: ResumeCreate,
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    resume = crud_resume.create_resume(db, user.id, resume_in)
    return ResumeSingleResponse(status=201, message="Resume created successfully", data=resume)


@router.get("/{resume_id}", response_model=ResumeSingleResponse)
def read_resume(
    resume_id: str,
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    resume = crud_resume.get_resume(db, resume_id, user.id)
    if resume is None:
        raise HTTPException(status_code=404, detail="Resume not found")
    return ResumeSingleResponse(data=resume)


@router.patch("/{resume_id}", response_model=ResumeSingleResponse)
def update_resume(
    resume_id: str,
    resume_in: ResumeUpdate,
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    resume = crud_resume.update_resume(db, resume_id, user.id, resume_in)
    if resume is None:
        raise HTTPException(status_code=404, detail="Resume not found")
    return ResumeSingleResponse(message="Resume updated successfully", data=resume)


@router.delete("/{resume_id}", response_model=ResumeSingleResponse)
def delete_resume(
    resume_id: str,
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    if not crud_resume.delete_resume(db, resume_id, user.id):
        raise HTTPException(status_code=404, detail="Resume not found")
    return ResumeSingleResponse(message="Resume deleted successfully")


@router.post("/{resume_id}/match", response_model=ResumeMatchResponse)
def match_resume_to_job(
    resume_id: str,
    payload: ResumeMatchRequest,
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    """Score a resume against a job description by keyword overlap."""
    resume = crud_resume.get_resume(db, resume_id, user.id)
    if resume is None:
        raise HTTPException(status_code=404, detail="Resume not found")
    try:
        content = parse_resume_content(resume.content)
    except ResumeContentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ResumeMatchResponse(data=match_resume(content, payload.jobDescription))
