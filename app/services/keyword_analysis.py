"""Keyword extraction from job descriptions and resume relevance scoring."""
import re
from collections import Counter
from typing import Dict, List, Pattern

from app.schemas.ResumeSchemas import ResumeContent, ResumeMatchReport, SkillsGap

MAX_KEYWORDS = 30
IMPORTANT_BOOST = 10
MAX_REPEAT_BONUS = 5

STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "will", "with", "we", "you", "your", "our",
    "this", "these", "those", "they", "them", "their", "what", "which",
    "who", "when", "where", "why", "how", "all", "each", "every", "some",
    "any", "most", "more", "many", "such", "only", "own", "same", "so",
    "than", "too", "very", "can", "just", "should", "would",
    "could", "may", "might", "must", "shall", "am",
    "been", "being", "have", "had", "having", "do", "does", "did",
    "doing", "i", "me", "my", "myself", "us", "or", "but", "if",
    "looking", "seeking", "experience", "work", "working", "join", "team",
})

IMPORTANT_KEYWORDS = frozenset({
    # languages
    "javascript", "typescript", "python", "java", "ruby", "go", "rust", "php", "swift", "kotlin",
    # frameworks
    "react", "angular", "vue", "nextjs", "express", "django", "flask", "fastapi", "spring", "laravel", "rails",
    # tooling
    "docker", "kubernetes", "aws", "azure", "gcp", "jenkins", "git", "devops", "terraform",
    # roles and qualities
    "senior", "junior", "lead", "architect", "developer", "engineer", "analyst", "designer",
    "manager", "director", "agile", "scrum", "leadership", "communication",
    # credentials
    "bachelor", "master", "phd", "degree", "certification", "certified", "pmp",
    # technical terms
    "api", "rest", "graphql", "microservices", "database", "sql", "nosql", "mongodb", "postgresql",
    "frontend", "backend", "fullstack", "mobile", "web", "cloud", "saas", "paas",
})

_NON_WORD = re.compile(r"[\W_]+")

REQUIRED_PATTERNS: List[Pattern] = [
    re.compile(r"required:?\s*([^.]+)"),
    re.compile(r"must have:?\s*([^.]+)"),
    re.compile(r"requirements?:?\s*([^.]+)"),
    re.compile(r"essential:?\s*([^.]+)"),
]
PREFERRED_PATTERNS: List[Pattern] = [
    re.compile(r"preferred:?\s*([^.]+)"),
    re.compile(r"nice to have:?\s*([^.]+)"),
    re.compile(r"bonus:?\s*([^.]+)"),
    re.compile(r"preferred qualifications?:?\s*([^.]+)"),
]
EXPERIENCE_PATTERNS: List[Pattern] = [
    re.compile(r"(\d+)\+?\s*years?\s*(?:of\s*)?experience"),
    re.compile(r"experience with\s*([^.]+)"),
    re.compile(r"experienced in\s*([^.]+)"),
]


def tokenize(text: str) -> List[str]:
    if not text:
        return []
    words = _NON_WORD.sub(" ", text.lower()).split()
    return [w for w in words if len(w) > 2 and w not in STOP_WORDS]


def extract_keywords(job_description: str, limit: int = MAX_KEYWORDS) -> List[str]:
    """Rank words by frequency, boosting known technical terms."""
    counts = Counter(tokenize(job_description))
    ranked = sorted(
        counts.items(),
        key=lambda kv: (IMPORTANT_BOOST if kv[0] in IMPORTANT_KEYWORDS else 0) + kv[1],
        reverse=True,
    )
    return [word for word, _ in ranked[:limit]]


def _collect(text: str, patterns: List[Pattern]) -> List[str]:
    found: Dict[str, None] = {}
    for pattern in patterns:
        for match in pattern.finditer(text):
            value = match.group(1).strip()
            if value:
                found.setdefault(value, None)
    return list(found)


def extract_skill_requirements(job_description: str) -> Dict[str, List[str]]:
    lowered = (job_description or "").lower()
    return {
        "required": _collect(lowered, REQUIRED_PATTERNS),
        "preferred": _collect(lowered, PREFERRED_PATTERNS),
        "experience": _collect(lowered, EXPERIENCE_PATTERNS),
    }


def _word_pattern(keyword: str) -> Pattern:
    # whole words only, so "java" does not match "javascript"
    return re.compile(r"\b" + re.escape(keyword.lower()) + r"\b", re.IGNORECASE)


def analyze_resume(resume_text: str, keywords: List[str]) -> List[str]:
    """Return the keywords that appear in the resume as whole words."""
    if not resume_text or not keywords:
        return []
    found: Dict[str, None] = {}
    for keyword in keywords:
        if keyword and _word_pattern(keyword).search(resume_text):
            found.setdefault(keyword, None)
    return list(found)


def score_resume_relevance(resume_text: str, keywords: List[str]) -> float:
    """Percentage of keywords matched plus a small bonus for repeats, capped at 100."""
    if not resume_text or not keywords:
        return 0.0
    found = analyze_resume(resume_text, keywords)
    score = len(found) / len(keywords) * 100
    for keyword in found:
        occurrences = len(_word_pattern(keyword).findall(resume_text))
        if occurrences > 1:
            score += min(occurrences - 1, MAX_REPEAT_BONUS)
    return min(score, 100.0)


def identify_skills_gap(resume_skills: List[str], required_skills: List[str]) -> SkillsGap:
    have = {s.lower() for s in resume_skills}
    matched = [s for s in required_skills if s.lower() in have]
    missing = [s for s in required_skills if s.lower() not in have]
    rate = len(matched) / len(required_skills) * 100 if required_skills else 0.0
    return SkillsGap(matched=matched, missing=missing, matchRate=rate)


def resume_to_text(content: ResumeContent) -> str:
    """Flatten structured resume content into plain text for matching."""
    personal = content.personal
    lines = [personal.fullName, personal.summary or ""]
    for exp in content.experience:
        lines.extend([exp.title, exp.company, exp.description])
    for edu in content.education:
        lines.extend([edu.degree, edu.school, edu.details or ""])
    lines.append(", ".join(content.skills))
    return "\n".join(line for line in lines if line)


def match_resume(content: ResumeContent, job_description: str) -> ResumeMatchReport:
    """Score a resume against a job description."""
    text = resume_to_text(content)
    keywords = extract_keywords(job_description)
    found = analyze_resume(text, keywords)
    resume_skills = set(s.lower() for s in content.skills) | set(k.lower() for k in found)
    return ResumeMatchReport(
        keywords=keywords,
        foundKeywords=found,
        score=round(score_resume_relevance(text, keywords), 1),
        skillsGap=identify_skills_gap(sorted(resume_skills), [k for k in keywords if k in IMPORTANT_KEYWORDS]),
        requirements=extract_skill_requirements(job_description),
    )


def suggest_improvements(found_keywords: List[str], keywords: List[str]) -> List[str]:
    """Plain-language hints from how many job keywords the resume covers."""
    if not keywords:
        return []
    found = {k.lower() for k in found_keywords}
    missing = [k for k in keywords if k.lower() not in found]

    suggestions = []
    if missing:
        suggestions.append(f"Consider adding these keywords to your resume: {', '.join(missing[:5])}")
    coverage = len(found_keywords) / len(keywords)
    if coverage < 0.3:
        suggestions.append(
            "Your resume could better match the job description. Consider highlighting more relevant experience."
        )
    elif coverage > 0.7:
        suggestions.append("Great keyword match! Your resume aligns well with the job requirements.")
    return suggestions
