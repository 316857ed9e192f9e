from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class FontSizes(BaseModel):
    base: str
    heading1: str
    heading2: str
    heading3: str


class ColorPalette(BaseModel):
    primary: str
    secondary: str
    text: str
    background: str
    accent: str


class Spacing(BaseModel):
    section: str
    paragraph: str
    line: str


class Borders(BaseModel):
    style: str
    width: str
    color: str


class TemplateStyles(BaseModel):
    fontFamily: str
    fontSize: FontSizes
    colors: ColorPalette
    spacing: Spacing
    borders: Optional[Borders] = None


class Margins(BaseModel):
    top: str
    right: str
    bottom: str
    left: str


class TemplateLayout(BaseModel):
    columns: Literal[1, 2]
    sectionOrder: List[str]
    headerPosition: Literal["top", "left", "right"]
    margins: Margins


class CustomizationOptions(BaseModel):
    allowColorChange: bool
    allowFontChange: bool
    allowLayoutChange: bool
    colorPresets: Optional[List[str]] = None
    fontPresets: Optional[List[str]] = None


class ResumeTemplate(BaseModel):
    """A catalog entry: visual styles, layout and what callers may override."""
    id: str
    name: str
    description: str
    thumbnail: str
    isAtsOptimized: bool
    styles: TemplateStyles
    layout: TemplateLayout
    customizationOptions: CustomizationOptions

    model_config = {"frozen": True}


class ColorOverrides(BaseModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None
    text: Optional[str] = None
    background: Optional[str] = None
    accent: Optional[str] = None


class FontSizeOverrides(BaseModel):
    base: Optional[str] = None
    heading1: Optional[str] = None
    heading2: Optional[str] = None
    heading3: Optional[str] = None


class LayoutOverrides(BaseModel):
    columns: Optional[Literal[1, 2]] = None
    sectionOrder: Optional[List[str]] = None
    headerPosition: Optional[Literal["top", "left", "right"]] = None


class TemplateCustomizations(BaseModel):
    """Caller-supplied overrides. Only the parts a template permits are applied."""
    colors: Optional[ColorOverrides] = None
    fontFamily: Optional[str] = None
    fontSize: Optional[FontSizeOverrides] = None
    layout: Optional[LayoutOverrides] = None

    model_config = {"extra": "ignore"}


class AtsValidation(BaseModel):
    isValid: bool
    score: int = Field(ge=0, le=100)
    issues: List[str] = Field(default_factory=list)


class ExportPdfRequest(BaseModel):
    resumeId: str = Field(..., min_length=1)
    templateId: str = Field(..., min_length=1)
    customizations: Optional[TemplateCustomizations] = None


class ExportPdfData(BaseModel):
    html: str
    validation: AtsValidation
    message: str = "PDF generation successful. Use browser print function to save as PDF."


class ExportPdfResponse(BaseModel):
    status: int = 200
    message: str = "Resume exported"
    data: ExportPdfData


class TemplateListResponse(BaseModel):
    status: int = 200
    message: str = "Templates returned successfully"
    data: List[ResumeTemplate] = Field(default_factory=list)


class TemplateSingleResponse(BaseModel):
    status: int = 200
    message: str = "Template returned successfully"
    data: ResumeTemplate
