import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import require_user
from app.core.config import settings
from app.core.exceptions import DependencyConfigError
from app.schemas.ResumeSchemas import GenerateAnalysis, GenerateRequest, GenerateResponse, GenerateResult
from app.services.ai_service import optimize_resume
from app.services.auth_service import AuthUser
from app.services.keyword_analysis import (
    analyze_resume,
    extract_keywords,
    extract_skill_requirements,
    score_resume_relevance,
    suggest_improvements,
)
from app.services.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

router = APIRouter()

limiter = RateLimiter(settings.GENERATE_RATE_LIMIT, settings.GENERATE_RATE_PERIOD_SECONDS)


@router.post("/generate", response_model=GenerateResponse)
def generate_optimized_resume(
    payload: GenerateRequest,
    user: AuthUser = Depends(require_user),
):
    """
    Analyze a plain-text resume against a job description and ask the model
    for an optimized version. Limited per user to GENERATE_RATE_LIMIT calls
    per GENERATE_RATE_PERIOD_SECONDS.
    """
    if not limiter.allow(user.id):
        raise HTTPException(
            status_code=429,
            detail="Rate limit exceeded. Please try again later.",
            headers={"Retry-After": str(limiter.window_seconds)},
        )

    keywords = extract_keywords(payload.jobDescription)
    relevant = analyze_resume(payload.resume, keywords)
    analysis = GenerateAnalysis(
        keywords=keywords,
        relevantSections=relevant,
        relevanceScore=round(score_resume_relevance(payload.resume, keywords), 1),
        skillRequirements=extract_skill_requirements(payload.jobDescription),
        suggestions=suggest_improvements(relevant, keywords),
    )
    logger.info(
        "Generate for user %s: %d keywords, %d found, score %.1f",
        user.id, len(keywords), len(relevant), analysis.relevanceScore,
    )

    try:
        optimized = optimize_resume(payload.resume, payload.jobDescription, relevant)
    except DependencyConfigError as e:
        logger.error("Resume optimization unavailable: %s", e)
        raise HTTPException(status_code=500, detail="Service configuration error")
    if optimized is None:
        raise HTTPException(status_code=500, detail="Failed to generate resume content. Please try again.")

    return GenerateResponse(data=GenerateResult(optimizedContent=optimized, analysis=analysis))
