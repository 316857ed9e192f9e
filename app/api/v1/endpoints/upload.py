import logging
from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool
from supabase import Client

from app.api.deps import get_db, require_user
from app.core.exceptions import ResumeImportError
from app.crud import crud_resume
from app.schemas.ImportSchemas import UploadResponse, UploadResult
from app.schemas.ResumeSchemas import ResumeCreate
from app.services.analytics import capture_event
from app.services.auth_service import AuthUser
from app.services.resume_import import MAX_UPLOAD_BYTES, detect_file_type, extract_text, parse_resume_text

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_resume(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    """
    Import a PDF or DOCX resume: extract its text, parse it into resume
    content and save it as a new resume owned by the caller.
    """
    file_type = detect_file_type(file.filename, file.content_type)
    if file_type is None:
        raise HTTPException(status_code=400, detail="Please upload a DOCX or PDF file.")

    data = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File size must be less than 10MB.")

    try:
        text = await run_in_threadpool(extract_text, data, file_type)
    except ResumeImportError as e:
        logger.info("Upload %r from user %s unreadable: %s", file.filename, user.id, e)
        raise HTTPException(status_code=400, detail=str(e))
    if not text.strip():
        raise HTTPException(
            status_code=400,
            detail="Could not extract text from the file. Please ensure the file contains text.",
        )

    parsed = parse_resume_text(text)
    resume_in = ResumeCreate(title=f"Resume uploaded on {date.today().isoformat()}", content=parsed.content)
    resume = await run_in_threadpool(crud_resume.create_resume, db, user.id, resume_in)

    background_tasks.add_task(
        capture_event,
        "resume_uploaded",
        user.id,
        {"fileType": file_type, "experienceCount": len(parsed.content.experience)},
    )
    return UploadResponse(data=UploadResult(resumeId=resume.id, filename=file.filename or "", parsed=parsed))
