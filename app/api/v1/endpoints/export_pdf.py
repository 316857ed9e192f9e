import logging
from typing import Tuple

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import Response
from supabase import Client

from app.api.deps import get_db, require_user
from app.core.exceptions import ResumeContentError
from app.crud import crud_resume
from app.schemas.template import AtsValidation, ExportPdfData, ExportPdfRequest, ExportPdfResponse
from app.services.analytics import capture_event
from app.services.auth_service import AuthUser
from app.services.resume_normalization import parse_resume_content
from app.services.resume_renderer import generate_html, validate_ats_compatibility
from app.services.templates import get_template_by_id
from app.tools.pdf_generator import create_pdf

logger = logging.getLogger(__name__)

router = APIRouter()


def render_resume(db: Client, user: AuthUser, payload: ExportPdfRequest) -> Tuple[str, AtsValidation]:
    template = get_template_by_id(payload.templateId)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")

    resume = crud_resume.get_resume(db, payload.resumeId, user.id)
    if resume is None:
        raise HTTPException(status_code=404, detail="Resume not found")

    try:
        content = parse_resume_content(resume.content)
    except ResumeContentError as e:
        raise HTTPException(status_code=422, detail=str(e))

    html = generate_html(template, content, payload.customizations)
    return html, validate_ats_compatibility(html)


@router.post("/export-pdf", response_model=ExportPdfResponse)
def export_pdf(
    payload: ExportPdfRequest,
    background_tasks: BackgroundTasks,
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    """Render a resume to printable HTML plus an ATS report; the client prints it to PDF."""
    html, validation = render_resume(db, user, payload)
    background_tasks.add_task(
        capture_event,
        "resume_exported",
        user.id,
        {"template_id": payload.templateId, "ats_score": validation.score},
    )
    return ExportPdfResponse(data=ExportPdfData(html=html, validation=validation))


@router.post("/export-pdf/file")
def export_pdf_file(
    payload: ExportPdfRequest,
    user: AuthUser = Depends(require_user),
    db: Client = Depends(get_db),
):
    """Render a resume straight to a PDF file with WeasyPrint."""
    html, validation = render_resume(db, user, payload)
    pdf_bytes = create_pdf(html)
    if pdf_bytes is None:
        raise HTTPException(status_code=500, detail="PDF generation failed")

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="resume-{payload.resumeId}.pdf"',
            "X-ATS-Score": str(validation.score),
        },
    )
