"""
Tests for resume import: file type detection, text extraction and parsing
"""
from io import BytesIO
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from docx import Document

from app.core.exceptions import ResumeImportError
from app.services.resume_import import (
    DOCX_TYPE,
    PDF_TYPE,
    detect_file_type,
    extract_date_range,
    extract_text,
    extract_text_from_docx,
    extract_text_from_pdf,
    parse_resume_text,
)

RESUME_TEXT = """Jane Doe
jane.doe@example.com | (555) 123-4567
San Francisco, CA

Summary
Backend engineer with eight years of Python experience.

Experience
Senior Developer at Test Corp
Jan 2020 - Present
- Built Python APIs on AWS with Docker
- Led a team of four engineers

Developer, Initech
2016 - 2019
Maintained Django services and PostgreSQL databases.

Education
BS Computer Science, Test University
2012 - 2016

Skills
Python, Django, PostgreSQL, Docker, AWS, Git, Leadership
"""


def docx_bytes(text):
    document = Document()
    for line in text.splitlines():
        document.add_paragraph(line)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.mark.parametrize(
    "filename, content_type, expected",
    [
        ("cv.pdf", "application/pdf", PDF_TYPE),
        ("cv.docx", DOCX_TYPE, DOCX_TYPE),
        ("CV.DOCX", "application/octet-stream", DOCX_TYPE),
        ("cv.txt", "text/plain", None),
        (None, None, None),
    ],
)
def test_detect_file_type(filename, content_type, expected):
    assert detect_file_type(filename, content_type) == expected


def test_parse_resume_text_personal_info():
    parsed = parse_resume_text(RESUME_TEXT)
    personal = parsed.content.personal

    assert personal.fullName == "Jane Doe"
    assert personal.email == "jane.doe@example.com"
    assert personal.phone == "(555) 123-4567"
    assert personal.location == "San Francisco, CA"
    assert personal.summary == "Backend engineer with eight years of Python experience."
    assert parsed.validation.personal.isValid is True
    assert parsed.validation.personal.confidence == 1.0


def test_parse_resume_text_experience_blocks():
    experience = parse_resume_text(RESUME_TEXT).content.experience

    assert len(experience) == 2
    first, second = experience
    assert (first.title, first.company, first.duration) == ("Senior Developer", "Test Corp", "Jan 2020 - Present")
    assert first.description == "Built Python APIs on AWS with Docker Led a team of four engineers"
    assert (second.title, second.company, second.duration) == ("Developer", "Initech", "2016 - 2019")


def test_parse_resume_text_education_and_skills():
    parsed = parse_resume_text(RESUME_TEXT)

    education = parsed.content.education
    assert len(education) == 1
    assert education[0].degree == "BS Computer Science"
    assert education[0].school == "Test University"
    assert education[0].year == "2016"

    assert parsed.content.skills == ["Python", "Django", "PostgreSQL", "AWS", "Docker", "Git", "Leadership"]
    assert parsed.skillCategories["Cloud & DevOps"] == ["AWS", "Docker"]
    assert "sql" not in [s.lower() for s in parsed.content.skills]
    assert parsed.validation.skills.isValid is True


def test_parse_resume_text_flags_thin_content():
    parsed = parse_resume_text("just some words without structure")

    assert parsed.content.experience == []
    assert parsed.validation.skills.isValid is False
    assert parsed.validation.personal.isValid is False
    assert parsed.rawText == "just some words without structure"


def test_extract_date_range_present_role():
    assert extract_date_range("March 2018 to Present") == ("March 2018", None, 0.9)
    assert extract_date_range("no dates here") == (None, None, 0.0)


def test_extract_text_from_docx():
    text = extract_text_from_docx(docx_bytes(RESUME_TEXT))
    assert text.startswith("Jane Doe")
    assert parse_resume_text(text).content.experience[0].company == "Test Corp"


def test_extract_text_from_pdf_joins_pages():
    pages = [SimpleNamespace(extract_text=lambda: "Jane Doe"), SimpleNamespace(extract_text=lambda: None)]
    with patch("app.services.resume_import.PdfReader", return_value=SimpleNamespace(pages=pages)):
        assert extract_text(b"%PDF-1.7", PDF_TYPE) == "Jane Doe"


@pytest.mark.parametrize("reader", [extract_text_from_pdf, extract_text_from_docx])
def test_unreadable_files_raise_import_error(reader):
    with pytest.raises(ResumeImportError):
        reader(b"this is not a document")
