"""Render resume content into a printable HTML document using a catalog template.

The HTML is the export format: the client prints it to PDF. Rendering is
deterministic, so identical inputs always give identical output.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup
from jinja2 import Environment, select_autoescape

from app.schemas.ResumeSchemas import ResumeContent
from app.schemas.template import (
    AtsValidation,
    ResumeTemplate,
    TemplateCustomizations,
    TemplateLayout,
    TemplateStyles,
)

KNOWN_SECTIONS = ("header", "summary", "experience", "education", "skills")
SIDEBAR_SECTIONS = ("skills", "education")

SECTION_HEADINGS = {
    "summary": "Professional Summary",
    "experience": "Work Experience",
    "education": "Education",
    "skills": "Skills",
}

STANDARD_HEADINGS = {
    "summary", "professional summary", "profile", "objective", "about",
    "experience", "work experience", "professional experience", "employment history",
    "education", "skills", "technical skills", "certifications", "projects",
}

_COLOR = re.compile(
    r"^(#[0-9a-fA-F]{3,8}"
    r"|rgba?\(\s*\d{1,3}%?\s*,\s*\d{1,3}%?\s*,\s*\d{1,3}%?\s*(,\s*(0|1|0?\.\d+)\s*)?\)"
    r"|[a-zA-Z]{3,20})$"
)
_FONT = re.compile(r"^[A-Za-z0-9 ,-]{1,100}$")
_SIZE = re.compile(r"^\d{1,3}(\.\d+)?(pt|px|em|rem|%)$")
_EMAIL = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")

RESUME_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ content.personal.fullName or 'Resume' }}</title>
  <style>
    @media print {
      body { margin: 0; padding: 0; }
      .no-print { display: none !important; }
    }
    body {
      font-family: {{ styles.fontFamily }};
      font-size: {{ styles.fontSize.base }};
      color: {{ styles.colors.text }};
      background-color: {{ styles.colors.background }};
      line-height: {{ styles.spacing.line }};
      margin: 0;
      padding: 0;
    }
    .resume-container {
      max-width: 8.5in;
      margin: 0 auto;
      padding: {{ layout.margins.top }} {{ layout.margins.right }} {{ layout.margins.bottom }} {{ layout.margins.left }};
      background: {{ styles.colors.background }};
      min-height: 11in;
    }
    h1 { font-size: {{ styles.fontSize.heading1 }}; color: {{ styles.colors.primary }}; margin: 0 0 0.5rem 0; }
    h2 {
      font-size: {{ styles.fontSize.heading2 }};
      color: {{ styles.colors.primary }};
      margin: {{ styles.spacing.section }} 0 0.75rem 0;
{% if styles.borders %}
      border-bottom: {{ styles.borders.width }} {{ styles.borders.style }} {{ styles.borders.color }};
      padding-bottom: 0.5rem;
{% else %}
      padding-bottom: 0;
{% endif %}
    }
    h3 { font-size: {{ styles.fontSize.heading3 }}; color: {{ styles.colors.secondary }}; margin: 0 0 0.5rem 0; }
    p { margin: 0 0 {{ styles.spacing.paragraph }} 0; }
    .section { margin-bottom: {{ styles.spacing.section }}; }
    .accent { color: {{ styles.colors.accent }}; }
    .contact-info { color: {{ styles.colors.secondary }}; margin-bottom: 1rem; }
    .experience-item, .education-item { margin-bottom: 1.5rem; }
{% if layout.columns == 2 %}
    .content-wrapper {
      display: grid;
      grid-template-columns: {{ '1fr 2fr' if layout.headerPosition == 'left' else '2fr 1fr' }};
      gap: 2rem;
    }
{% endif %}
    ul { margin: 0; padding-left: 1.5rem; }
    li { margin-bottom: 0.25rem; }
  </style>
</head>
<body>
  <div class="resume-container">
{% macro render_section(name) %}
{% if name == 'header' %}
    <div class="section header">
      <h1>{{ content.personal.fullName or 'Your Name' }}</h1>
      <div class="contact-info">{{ contact | join(' | ') }}</div>
    </div>
{% elif name == 'summary' and content.personal.summary %}
    <div class="section summary">
      <h2>{{ headings.summary }}</h2>
      <p>{{ content.personal.summary }}</p>
    </div>
{% elif name == 'experience' and content.experience %}
    <div class="section experience">
      <h2>{{ headings.experience }}</h2>
{% for exp in content.experience %}
      <div class="experience-item">
        <h3>{{ exp.title }}</h3>
        <div class="accent">{{ [exp.company, exp.duration] | select | join(' | ') }}</div>
        <p>{{ exp.description }}</p>
      </div>
{% endfor %}
    </div>
{% elif name == 'education' and content.education %}
    <div class="section education">
      <h2>{{ headings.education }}</h2>
{% for edu in content.education %}
      <div class="education-item">
        <h3>{{ edu.degree }}</h3>
        <div class="accent">{{ [edu.school, edu.year] | select | join(' | ') }}</div>
{% if edu.details %}
        <p>{{ edu.details }}</p>
{% endif %}
      </div>
{% endfor %}
    </div>
{% elif name == 'skills' and content.skills %}
    <div class="section skills">
      <h2>{{ headings.skills }}</h2>
      <p>{{ content.skills | join(', ') }}</p>
    </div>
{% endif %}
{% endmacro %}
{% if layout.columns == 1 %}
{% for name in main_sections %}{{ render_section(name) }}{% endfor %}
{% else %}
{% for name in top_sections %}{{ render_section(name) }}{% endfor %}
    <div class="content-wrapper">
{% for column in columns %}
      <div class="column">
{% for name in column %}{{ render_section(name) }}{% endfor %}
      </div>
{% endfor %}
    </div>
{% endif %}
  </div>
</body>
</html>
"""


def _get_env() -> Environment:
    return Environment(
        autoescape=select_autoescape(["html", "xml"], default_for_string=True),
        trim_blocks=True,
        lstrip_blocks=True,
    )


_ENV = _get_env()
_RESUME_TEMPLATE = _ENV.from_string(RESUME_TEMPLATE)


def _safe(value: Optional[str], pattern: re.Pattern, fallback: str) -> str:
    if value is None:
        return fallback
    value = value.strip()
    return value if pattern.match(value) else fallback


def apply_customizations(
    template: ResumeTemplate,
    customizations: Optional[TemplateCustomizations] = None,
) -> Tuple[TemplateStyles, TemplateLayout]:
    """Merge caller overrides into the template's styles and layout.

    Each override group is applied only when the template's
    customizationOptions allow it; disallowed or malformed values are dropped.
    """
    styles = template.styles.model_copy(deep=True)
    layout = template.layout.model_copy(deep=True)
    if customizations is None:
        return styles, layout

    options = template.customizationOptions

    if options.allowColorChange and customizations.colors is not None:
        current = styles.colors.model_dump()
        for role, value in customizations.colors.model_dump(exclude_none=True).items():
            current[role] = _safe(value, _COLOR, current[role])
        styles.colors = styles.colors.model_validate(current)

    if options.allowFontChange:
        styles.fontFamily = _safe(customizations.fontFamily, _FONT, styles.fontFamily)
        if customizations.fontSize is not None:
            sizes = styles.fontSize.model_dump()
            for key, value in customizations.fontSize.model_dump(exclude_none=True).items():
                sizes[key] = _safe(value, _SIZE, sizes[key])
            styles.fontSize = styles.fontSize.model_validate(sizes)

    if options.allowLayoutChange and customizations.layout is not None:
        overrides = customizations.layout
        if overrides.columns is not None:
            layout.columns = overrides.columns
        if overrides.headerPosition is not None:
            layout.headerPosition = overrides.headerPosition
        if overrides.sectionOrder:
            order = [s for s in dict.fromkeys(overrides.sectionOrder) if s in KNOWN_SECTIONS]
            if order:
                layout.sectionOrder = order

    return styles, layout


def _split_columns(layout: TemplateLayout) -> Dict[str, Any]:
    order = [s for s in layout.sectionOrder if s in KNOWN_SECTIONS]
    if layout.columns == 1:
        return {"main_sections": order, "top_sections": [], "columns": []}

    top: List[str] = []
    side: List[str] = []
    main: List[str] = []
    for name in order:
        if name == "header":
            (side if layout.headerPosition == "left" else top).append(name)
        elif name in SIDEBAR_SECTIONS:
            side.append(name)
        else:
            main.append(name)
    columns = [side, main] if layout.headerPosition == "left" else [main, side]
    return {"main_sections": order, "top_sections": top, "columns": columns}


def generate_html(
    template: ResumeTemplate,
    resume_data: ResumeContent,
    customizations: Optional[TemplateCustomizations] = None,
) -> str:
    """Render `resume_data` with `template` into a complete HTML document."""
    styles, layout = apply_customizations(template, customizations)
    personal = resume_data.personal
    contact = [v for v in (personal.email, personal.phone, personal.location) if v]

    context = {
        "content": resume_data,
        "styles": styles,
        "layout": layout,
        "contact": contact,
        "headings": SECTION_HEADINGS,
        **_split_columns(layout),
    }
    return _RESUME_TEMPLATE.render(context)


def validate_ats_compatibility(html: str) -> AtsValidation:
    """Heuristic check of how well the document survives ATS parsing."""
    soup = BeautifulSoup(html, "html.parser")
    issues: List[str] = []
    penalty = 0

    if soup.find("img") is not None:
        issues.append("Contains images which may not be readable by ATS")
        penalty += 20
    if soup.find("table") is not None:
        issues.append("Contains tables which may cause parsing issues")
        penalty += 20

    for tag in soup(["style", "script"]):
        style_text = tag.get_text()
        if "grid-template-columns" in style_text or "column-count" in style_text:
            issues.append("Uses a multi-column layout which some ATS read out of order")
            penalty += 10
            break

    text = soup.get_text(" ", strip=True) if soup.body is None else soup.body.get_text(" ", strip=True)
    if any(ord(ch) > 127 for ch in text):
        issues.append("Contains special characters that may not be parsed correctly")
        penalty += 10

    odd_headings = [
        h.get_text(strip=True) for h in soup.find_all("h2")
        if h.get_text(strip=True).lower() not in STANDARD_HEADINGS
    ]
    if odd_headings:
        issues.append("Uses non-standard section headings: " + ", ".join(odd_headings))
        penalty += 10

    if not _EMAIL.search(text):
        issues.append("No email address found in contact information")
        penalty += 15

    return AtsValidation(isValid=not issues, score=max(0, 100 - penalty), issues=issues)
