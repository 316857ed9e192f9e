"""
Section and whole-resume rewriting with Gemini.
Plain prompt in, plain text out; no function calling.
"""
import logging
from typing import List, Optional

import google.generativeai as genai

from app.core.config import settings, validate_ai_config
from app.core.exceptions import DependencyConfigError

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a professional resume writer who optimizes resume sections for specific "
    "job descriptions while maintaining factual accuracy. Always return properly formatted HTML."
)

SECTION_PROMPTS = {
    "summary": (
        "Rewrite this professional summary to align with the job requirements while maintaining accuracy:\n\n"
        "Current Summary: {current}\n\nJob Description: {job}\n\n"
        "Return an optimized professional summary that highlights relevant experience and skills "
        "from the job description. Format as HTML with <p> tags."
    ),
    "experience": (
        "Optimize this work experience section to better match the job requirements:\n\n"
        "Current Experience: {current}\n\nJob Description: {job}\n\n"
        "Rewrite the experience section to emphasize accomplishments and responsibilities that align "
        "with the job requirements. Use relevant keywords naturally. "
        "Format as HTML with proper <p>, <strong>, and <ul>/<li> tags."
    ),
    "education": (
        "Enhance this education section to highlight relevant qualifications for the job:\n\n"
        "Current Education: {current}\n\nJob Description: {job}\n\n"
        "Reformat the education section to emphasize relevant coursework, projects, or achievements "
        "that align with the job requirements. Format as HTML with <p> and <strong> tags."
    ),
    "skills": (
        "Optimize this skills section to match the job requirements:\n\n"
        "Current Skills: {current}\n\nJob Description: {job}\n\n"
        "Reorganize and enhance the skills section to prominently feature skills mentioned in the "
        "job description. Group related skills logically. Format as HTML with <ul> and <li> tags."
    ),
}


OPTIMIZE_PROMPT = (
    "Optimize this resume for the job description below. Keep every fact accurate and do not "
    "invent experience, employers or dates.\n\n"
    "Resume:\n{resume}\n\nJob Description:\n{job}\n\n"
    "Job keywords the resume already covers: {found}\n\n"
    "Return the complete optimized resume as HTML using <h2>, <p>, <strong> and <ul>/<li> tags."
)


def build_prompt(section_type: str, current_content: str, job_description: str) -> str:
    # unknown section types fall back to the summary prompt
    template = SECTION_PROMPTS.get(section_type, SECTION_PROMPTS["summary"])
    return template.format(current=current_content, job=job_description)


def _ensure_configured() -> None:
    check = validate_ai_config()
    if not check.ok:
        raise DependencyConfigError(check.error)


def _generate_text(prompt: str, max_output_tokens: int) -> str:
    genai.configure(api_key=settings.GOOGLE_API_KEY)
    model = genai.GenerativeModel(settings.GOOGLE_MODEL, system_instruction=SYSTEM_INSTRUCTION)
    response = model.generate_content(
        prompt,
        generation_config={"temperature": 0.7, "max_output_tokens": max_output_tokens},
    )
    text = (response.text or "").strip()
    if not text:
        raise ValueError("No content generated")
    return text


def regenerate_section(section_type: str, current_content: str, job_description: str) -> str:
    """
    Ask the model to rewrite one resume section for a job description.

    Raises DependencyConfigError when no usable API key is configured. Any
    failure of the model call itself returns `current_content` unchanged.
    """
    _ensure_configured()
    prompt = build_prompt(section_type, current_content, job_description)
    try:
        return _generate_text(prompt, max_output_tokens=800)
    except Exception:
        logger.exception("Section regeneration failed for %s; returning current content", section_type)
        return current_content


def optimize_resume(resume_text: str, job_description: str, relevant_keywords: List[str]) -> Optional[str]:
    """Rewrite a whole resume for a job description; None when the model call fails."""
    _ensure_configured()
    prompt = OPTIMIZE_PROMPT.format(
        resume=resume_text,
        job=job_description,
        found=", ".join(relevant_keywords) or "none",
    )
    try:
        return _generate_text(prompt, max_output_tokens=2000)
    except Exception:
        logger.exception("Resume optimization failed")
        return None
