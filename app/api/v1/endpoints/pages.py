from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from supabase import Client

from app.api.deps import get_db
from app.core.exceptions import ResumeContentError
from app.crud import crud_resume
from app.services.resume_normalization import parse_resume_content
from app.services.resume_renderer import generate_html
from app.services.templates import get_default_template, get_template_by_id

router = APIRouter()


@router.get("/resumes/{resume_id}/print", response_class=HTMLResponse)
def print_resume(
    resume_id: str,
    request: Request,
    templateId: Optional[str] = None,
    db: Client = Depends(get_db),
):
    """Printable page for a resume. The session middleware has already set request.state.user."""
    user = request.state.user
    template = get_template_by_id(templateId) if templateId else get_default_template()
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")

    resume = crud_resume.get_resume(db, resume_id, user.id)
    if resume is None:
        raise HTTPException(status_code=404, detail="Resume not found")

    try:
        content = parse_resume_content(resume.content)
    except ResumeContentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return HTMLResponse(generate_html(template, content))
