import pydantic
from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict
from datetime import datetime


class PersonalInfo(BaseModel):
    fullName: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    summary: Optional[str] = None

    model_config = pydantic.ConfigDict(extra="ignore")


class Experience(BaseModel):
    title: str = ""
    company: str = ""
    duration: str = ""
    description: str = ""

    model_config = pydantic.ConfigDict(extra="ignore")


class Education(BaseModel):
    degree: str = ""
    school: str = ""
    year: str = ""
    details: Optional[str] = None

    model_config = pydantic.ConfigDict(extra="ignore")


class ResumeContent(BaseModel):
    """Structured body of a resume as stored in the `content` JSON column."""
    personal: PersonalInfo = Field(default_factory=PersonalInfo)
    experience: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)

    model_config = pydantic.ConfigDict(extra="ignore")


class Profile(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = pydantic.ConfigDict(from_attributes=True, extra="ignore")


class Resume(BaseModel):
    id: str
    user_id: str
    title: str
    # raw JSON as stored; parse with parse_resume_content before rendering
    content: Dict[str, Any] = Field(default_factory=dict)
    is_public: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = pydantic.ConfigDict(from_attributes=True, extra="ignore")


class ResumeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: ResumeContent = Field(default_factory=ResumeContent)
    is_public: bool = False


class ResumeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[ResumeContent] = None
    is_public: Optional[bool] = None


class ResumeListResponse(BaseModel):
    """Envelope response returned by GET /api/resumes

    Keeps a stable shape for the frontend: { status, message, data }
    where data is the list of resumes.
    """
    status: int = 200
    message: str = "Resumes returned successfully"
    data: List[Resume] = Field(default_factory=list)


class ResumeSingleResponse(BaseModel):
    """Envelope response for single resume retrieval: { status, message, data }"""
    status: int = 200
    message: str = "Resume returned successfully"
    data: Optional[Resume] = None


class ProfileResponse(BaseModel):
    status: int = 200
    message: str = "Profile returned successfully"
    data: Optional[Profile] = None


class ResumeMatchRequest(BaseModel):
    jobDescription: str = Field(..., min_length=1)


class SkillsGap(BaseModel):
    matched: List[str] = Field(default_factory=list)
    missing: List[str] = Field(default_factory=list)
    matchRate: float = 0.0


class ResumeMatchReport(BaseModel):
    keywords: List[str] = Field(default_factory=list)
    foundKeywords: List[str] = Field(default_factory=list)
    score: float = 0.0
    skillsGap: SkillsGap = Field(default_factory=SkillsGap)
    requirements: Dict[str, List[str]] = Field(default_factory=dict)


class ResumeMatchResponse(BaseModel):
    status: int = 200
    message: str = "Resume matched against job description"
    data: ResumeMatchReport


class RegenerateSectionRequest(BaseModel):
    resumeId: str = Field(..., min_length=1)
    sectionType: str = Field(..., min_length=1)
    currentContent: str = ""
    jobDescription: str = Field(..., min_length=1)


class RegenerateSectionResponse(BaseModel):
    status: int = 200
    message: str = "Section regenerated"
    content: str


class GenerateRequest(BaseModel):
    resume: str = Field(..., min_length=1, max_length=10000)
    jobDescription: str = Field(..., min_length=1, max_length=5000)


class GenerateAnalysis(BaseModel):
    keywords: List[str] = Field(default_factory=list)
    relevantSections: List[str] = Field(default_factory=list)
    relevanceScore: float = 0.0
    skillRequirements: Dict[str, List[str]] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)


class GenerateResult(BaseModel):
    optimizedContent: str
    analysis: GenerateAnalysis


class GenerateResponse(BaseModel):
    status: int = 200
    message: str = "Resume optimized for the job description"
    data: GenerateResult
