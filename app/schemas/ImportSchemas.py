from typing import Dict, List

from pydantic import BaseModel, Field

from app.schemas.ResumeSchemas import ResumeContent


class FieldCheck(BaseModel):
    """How trustworthy one parsed part of an uploaded resume looks."""
    isValid: bool
    confidence: float = 0.0
    issues: List[str] = Field(default_factory=list)


class ImportValidation(BaseModel):
    personal: FieldCheck
    experience: List[FieldCheck] = Field(default_factory=list)
    education: List[FieldCheck] = Field(default_factory=list)
    skills: FieldCheck


class ParsedResume(BaseModel):
    content: ResumeContent
    skillCategories: Dict[str, List[str]] = Field(default_factory=dict)
    validation: ImportValidation
    rawText: str


class UploadResult(BaseModel):
    resumeId: str
    filename: str
    parsed: ParsedResume


class UploadResponse(BaseModel):
    status: int = 201
    message: str = "Resume imported successfully"
    data: UploadResult
