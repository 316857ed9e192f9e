"""Resume import from uploaded PDF or DOCX files.

Text comes out of the file with pypdf or python-docx; a set of regex and
layout heuristics then turns it into ResumeContent, with a confidence check
for each part so the editor can point at what needs a manual look.
"""
import logging
import os
import re
from io import BytesIO
from typing import Dict, List, Optional, Tuple

from docx import Document
from pypdf import PdfReader

from app.core.exceptions import ResumeImportError
from app.schemas.ImportSchemas import FieldCheck, ImportValidation, ParsedResume
from app.schemas.ResumeSchemas import Education, Experience, PersonalInfo, ResumeContent

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
SUPPORTED_TYPES = {PDF_TYPE: ".pdf", DOCX_TYPE: ".docx"}

SKILL_CATEGORIES: Dict[str, List[str]] = {
    "Programming Languages": [
        r"javascript", r"python", r"java", r"c\+\+", r"typescript", r"ruby", r"php", r"swift", r"kotlin", r"go",
    ],
    "Web Technologies": [
        r"html", r"css", r"react", r"angular", r"vue", r"node\.?js", r"express", r"django", r"flask", r"spring",
    ],
    "Databases": [r"sql", r"mysql", r"postgresql", r"mongodb", r"oracle", r"redis", r"elasticsearch", r"dynamodb"],
    "Cloud & DevOps": [r"aws", r"azure", r"gcp", r"docker", r"kubernetes", r"jenkins", r"terraform", r"ci/cd"],
    "Tools & Methodologies": [r"git", r"agile", r"scrum", r"jira", r"confluence", r"tdd", r"rest", r"graphql"],
    "Soft Skills": [r"leadership", r"communication", r"teamwork", r"problem.?solving", r"project.?management"],
}
MAX_SKILLS = 50

EMAIL = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE = re.compile(r"(?:\+?1[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b")
CITY_STATE = re.compile(r"\b[A-Z][A-Za-z .'-]+,\s*[A-Z]{2}(?:\s+\d{5}(?:-\d{4})?)?\b")

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"
_DASH = r"\s*(?:-|\u2013|\u2014|to)\s*"
DATE_RANGES: List[Tuple[re.Pattern, float]] = [
    (re.compile(rf"\b({_MONTH}\s+\d{{4}}){_DASH}({_MONTH}\s+\d{{4}}|present|current)", re.IGNORECASE), 0.9),
    (re.compile(rf"\b(\d{{1,2}}/\d{{4}}){_DASH}(\d{{1,2}}/\d{{4}}|present|current)", re.IGNORECASE), 0.7),
    (re.compile(rf"\b(\d{{4}}){_DASH}(\d{{4}}|present|current)\b", re.IGNORECASE), 0.7),
]

HEADER_AT = re.compile(r"^(.+?)\s+(?:at|@)\s+(.+)$", re.IGNORECASE)
HEADER_SEPARATED = re.compile(r"^(.+?)\s*(?:\||,|\s[-\u2013\u2014]\s)\s*(.+)$")

EDUCATION_HEADING = re.compile(
    r"\b(?:education|academic|university|college|degree|bachelor|master|ph\.?d|doctorate)\b", re.IGNORECASE
)
DEGREE = re.compile(
    r"\b(?:bachelor|master|ph\.?d|doctorate|b\.?sc?|b\.?a|m\.?sc?|m\.?a|mba)\b[^,\n]*", re.IGNORECASE
)
SCHOOL = re.compile(r"[^,\n]*\b(?:university|college|institute|school|academy)\b[^,\n]*", re.IGNORECASE)
YEAR = re.compile(r"\b(19|20)\d{2}\b")
SECTION_HEADINGS = frozenset({
    "experience", "work experience", "professional experience", "employment", "employment history",
    "work history", "education", "skills", "technical skills", "summary", "profile",
})
SUMMARY_HEADING = re.compile(r"^(?:professional\s+)?(?:summary|profile|objective|about me)\s*:?\s*$", re.IGNORECASE)


def detect_file_type(filename: Optional[str], content_type: Optional[str]) -> Optional[str]:
    """Return PDF_TYPE or DOCX_TYPE, from the content type or else the extension."""
    if content_type in SUPPORTED_TYPES:
        return content_type
    extension = os.path.splitext(filename or "")[1].lower()
    for file_type, ext in SUPPORTED_TYPES.items():
        if extension == ext:
            return file_type
    return None


def extract_text_from_pdf(pdf_content: bytes) -> str:
    """
    Extract text from a PDF file and return the raw text.
    """
    try:
        reader = PdfReader(BytesIO(pdf_content))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:
        raise ResumeImportError(f"Could not read PDF file: {e.__class__.__name__}") from e
    return "\n".join(pages).strip()


def extract_text_from_docx(docx_content: bytes) -> str:
    try:
        document = Document(BytesIO(docx_content))
    except Exception as e:
        raise ResumeImportError(f"Could not read DOCX file: {e.__class__.__name__}") from e
    lines = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append(" | ".join(cell.text.strip() for cell in row.cells if cell.text.strip()))
    return "\n".join(lines).strip()


def extract_text(content: bytes, file_type: str) -> str:
    if file_type == PDF_TYPE:
        return extract_text_from_pdf(content)
    if file_type == DOCX_TYPE:
        return extract_text_from_docx(content)
    raise ResumeImportError("Please upload a DOCX or PDF file.")


def _lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def extract_name(text: str) -> Tuple[str, float]:
    """Best name-looking line among the first three: 2-4 capitalized words, no digits."""
    best, confidence = "", 0.0
    for line in _lines(text)[:3]:
        words = line.split()
        if not 2 <= len(words) <= 4:
            continue
        if not all(w[0].isupper() for w in words) or any(ch.isdigit() for ch in line):
            continue
        if any(ch in line for ch in ",|@"):
            continue
        score = {2: 0.8, 3: 0.9}.get(len(words), 0.7)
        if score > confidence:
            best, confidence = line, score
    return best, confidence


def extract_summary(text: str) -> Optional[str]:
    lines = text.splitlines()
    for i, line in enumerate(lines):
        if SUMMARY_HEADING.match(line.strip()):
            paragraph = []
            for following in lines[i + 1:]:
                if not following.strip():
                    if paragraph:
                        break
                    continue
                paragraph.append(following.strip())
            return " ".join(paragraph) or None
    return None


def extract_personal_info(text: str) -> Tuple[PersonalInfo, float]:
    name, name_confidence = extract_name(text)
    email = EMAIL.search(text)
    phone = PHONE.search(text)
    location = CITY_STATE.search("\n".join(_lines(text)[:6]))

    info = PersonalInfo(
        fullName=name,
        email=email.group(0) if email else None,
        phone=phone.group(0).strip() if phone else None,
        location=location.group(0).strip() if location else None,
        summary=extract_summary(text),
    )
    weights = []
    if info.fullName:
        weights.append(name_confidence)
    if info.email:
        weights.append(1.0)
    if info.phone:
        weights.append(0.9)
    if info.location:
        weights.append(0.8)
    return info, (sum(weights) / len(weights) if weights else 0.0)


def extract_date_range(text: str) -> Tuple[Optional[str], Optional[str], float]:
    """(start, end, confidence); end is None for present/current roles."""
    for pattern, confidence in DATE_RANGES:
        match = pattern.search(text)
        if match:
            end = match.group(2)
            if end.lower() in ("present", "current"):
                end = None
            return match.group(1), end, confidence
    return None, None, 0.0


def _split_header(line: str) -> Tuple[str, str]:
    for pattern in (HEADER_AT, HEADER_SEPARATED):
        match = pattern.match(line)
        if match:
            return match.group(1).strip(), match.group(2).strip()
    return line, ""


def _is_heading(line: str) -> bool:
    return line.lower().rstrip(":").strip() in SECTION_HEADINGS


def _strip_dates(line: str) -> str:
    for pattern, _ in DATE_RANGES:
        line = pattern.sub("", line)
    return line.strip(" ,|()\t-")


def _looks_like_education(lines: List[str]) -> bool:
    return any(DEGREE.match(line) or SCHOOL.fullmatch(line) for line in lines[:2])


def extract_experience(text: str) -> List[Experience]:
    """Blank-line separated blocks that carry a date range and are not education."""
    experience = []
    for block in re.split(r"\n\s*\n", text):
        lines = [line for line in _lines(block) if not _is_heading(line)]
        if len(lines) < 2 or len(" ".join(lines)) <= 20:
            continue
        start, end, _ = extract_date_range(block)
        if start is None or _looks_like_education(lines):
            continue

        header = [cleaned for cleaned in (_strip_dates(line) for line in lines) if cleaned]
        if not header:
            continue
        title, company = _split_header(header[0])
        body = header[1:]
        if not company and body:
            company, body = body[0], body[1:]

        experience.append(
            Experience(
                title=title,
                company=company,
                duration=f"{start} - {end or 'Present'}",
                description=" ".join(line.lstrip("-*• ").strip() for line in body),
            )
        )
    return experience


def extract_education(text: str) -> List[Education]:
    lines = text.splitlines()
    start = next((i for i, line in enumerate(lines) if line.strip().lower().rstrip(":") == "education"), None)
    if start is None:
        start = next((i for i, line in enumerate(lines) if EDUCATION_HEADING.search(line)), None)
    if start is None:
        return []

    education = []
    window = lines[start:start + 10]
    for i, line in enumerate(window):
        degree = DEGREE.search(line)
        if not degree:
            continue
        nearby = " ".join(window[i:i + 2])
        school = SCHOOL.search(line) or SCHOOL.search(nearby)
        years = [m.group(0) for m in YEAR.finditer(nearby)]
        education.append(
            Education(
                degree=degree.group(0).strip(" ,"),
                school=school.group(0).strip(" ,") if school else "",
                year=years[-1] if years else "",
            )
        )
    return education


def extract_skills(text: str) -> Dict[str, List[str]]:
    """Known skills found as whole words, grouped by category, first spelling wins."""
    seen = set()
    categories: Dict[str, List[str]] = {}
    for category, patterns in SKILL_CATEGORIES.items():
        for pattern in patterns:
            for match in re.finditer(rf"(?<![\w+]){pattern}(?![\w+])", text, re.IGNORECASE):
                name = match.group(0)
                if name.lower() in seen:
                    continue
                seen.add(name.lower())
                categories.setdefault(category, []).append(name)
    return categories


def validate_personal_info(info: PersonalInfo) -> FieldCheck:
    issues = []
    checked = valid = 0
    if info.email:
        checked += 1
        if EMAIL.fullmatch(info.email):
            valid += 1
        else:
            issues.append("Invalid email format")
    if info.phone:
        checked += 1
        if PHONE.fullmatch(info.phone):
            valid += 1
        else:
            issues.append("Invalid phone format")
    if info.fullName:
        checked += 1
        if len(info.fullName.split()) >= 2:
            valid += 1
        else:
            issues.append("Name appears incomplete")
    if not checked:
        issues.append("No contact details found")
    return FieldCheck(isValid=valid > 0, confidence=valid / checked if checked else 0.0, issues=issues)


def validate_experience(entry: Experience) -> FieldCheck:
    issues = []
    if not entry.company.strip():
        issues.append("Company name is missing")
    if not entry.title.strip():
        issues.append("Position title is missing")
    if len(entry.description.strip()) < 20:
        issues.append("Job description is too short or missing")
    return FieldCheck(isValid=not issues, confidence=0.8 if not issues else 0.4, issues=issues)


def validate_education(entry: Education) -> FieldCheck:
    issues = []
    if not entry.school.strip():
        issues.append("Institution name is missing")
    if not entry.degree.strip():
        issues.append("Degree information is missing")
    return FieldCheck(isValid=not issues, confidence=0.7 if not issues else 0.3, issues=issues)


def validate_skills(skills: List[str]) -> FieldCheck:
    if not skills:
        return FieldCheck(isValid=False, confidence=0.0, issues=["No skills detected"])
    if len(skills) > MAX_SKILLS:
        return FieldCheck(isValid=False, confidence=0.4, issues=["Unusually high number of skills detected"])
    return FieldCheck(isValid=True, confidence=0.8)


def parse_resume_text(text: str) -> ParsedResume:
    """Turn extracted resume text into structured content plus per-part checks."""
    personal, _ = extract_personal_info(text)
    experience = extract_experience(text)
    education = extract_education(text)
    categories = extract_skills(text)
    skills = [name for names in categories.values() for name in names]

    logger.info(
        "Parsed resume text: %d experience, %d education, %d skills",
        len(experience), len(education), len(skills),
    )
    return ParsedResume(
        content=ResumeContent(personal=personal, experience=experience, education=education, skills=skills),
        skillCategories=categories,
        validation=ImportValidation(
            personal=validate_personal_info(personal),
            experience=[validate_experience(e) for e in experience],
            education=[validate_education(e) for e in education],
            skills=validate_skills(skills),
        ),
        rawText=text,
    )
