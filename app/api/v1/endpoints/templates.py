from fastapi import APIRouter, HTTPException

from app.schemas.template import TemplateListResponse, TemplateSingleResponse
from app.services.templates import get_template_by_id, list_templates

router = APIRouter()


@router.get("", response_model=TemplateListResponse)
def read_templates():
    return TemplateListResponse(data=list_templates())


@router.get("/{template_id}", response_model=TemplateSingleResponse)
def read_template(template_id: str):
    template = get_template_by_id(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return TemplateSingleResponse(data=template)
