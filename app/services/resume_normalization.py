import json
from typing import Any, Dict, List

import pydantic

from app.core.exceptions import ResumeContentError
from app.schemas.ResumeSchemas import ResumeContent


SCALARS = (int, float, bool)


def clean_value(value: Any, empty: Any = "") -> Any:
    """None becomes `empty` and numbers become strings; lists and dicts are left for validation."""
    if value is None:
        return empty
    if isinstance(value, SCALARS):
        return str(value)
    return value


def ensure_list_of_dicts(x: Any, key: str = "description") -> list:
    """Coerce input into a list of dicts where possible."""
    if x is None:
        return []
    if isinstance(x, dict):
        # maybe stored as single object
        return [x]
    if isinstance(x, list):
        out = []
        for item in x:
            if isinstance(item, dict):
                out.append(item)
            elif item is not None:
                # strings or primitives -> try to wrap
                out.append({key: str(item)})
        return out
    # primitive (str/int) -> wrap
    return [{key: str(x)}]


def normalize_skills(skills: Any) -> List[str]:
    """Normalize skills to a flat list of names."""
    if skills is None:
        return []
    if isinstance(skills, str):
        return [s.strip() for s in skills.split(",") if s.strip()]
    if isinstance(skills, dict):
        # dict-of-categories: flatten values
        out: List[str] = []
        for vals in skills.values():
            out.extend(normalize_skills(vals if isinstance(vals, list) else [vals]))
        return out
    if isinstance(skills, list):
        out = []
        for s in skills:
            if isinstance(s, dict):
                name = s.get("name") or s.get("skill")
                if name:
                    out.append(str(name))
            elif s is not None and str(s).strip():
                out.append(str(s).strip())
        return out
    # fallback
    return [str(skills)]


def normalize_experience(experience: Any) -> list:
    out = []
    for item in ensure_list_of_dicts(experience):
        item = dict(item)
        # some rows use position/startDate/responsibilities instead
        if "title" not in item and "position" in item:
            item["title"] = item.get("position")
        if "duration" not in item and ("startDate" in item or "endDate" in item):
            start, end = item.get("startDate") or "", item.get("endDate") or "Present"
            item["duration"] = f"{start} - {end}".strip(" -")
        if "description" not in item and isinstance(item.get("responsibilities"), list):
            item["description"] = " ".join(str(r) for r in item["responsibilities"])
        out.append({k: clean_value(v) for k, v in item.items()})
    return out


def normalize_education(education: Any) -> list:
    out = []
    for item in ensure_list_of_dicts(education, key="degree"):
        item = dict(item)
        if "school" not in item and "institution" in item:
            item["school"] = item.get("institution")
        if "year" not in item and "endDate" in item:
            item["year"] = item.get("endDate")
        out.append({k: clean_value(v, None if k == "details" else "") for k, v in item.items()})
    return out


def normalize_personal_info(pi: Any) -> dict:
    if not pi:
        return {}
    if isinstance(pi, dict):
        # missing values fall back to the model defaults
        pi = {k: clean_value(v) for k, v in pi.items() if v is not None}
        if not pi.get("fullName"):
            names = [pi.get("firstName"), pi.get("lastName")]
            full = " ".join(str(n) for n in names if n)
            if full:
                pi["fullName"] = full
        return pi
    # primitive
    return {"fullName": str(pi)}


def normalize_resume_content(raw: Any) -> Dict[str, Any]:
    """Coerce loosely shaped stored content into the ResumeContent layout."""
    if raw is None:
        return {}
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ResumeContentError("Resume content is not valid JSON") from e
    if not isinstance(raw, dict):
        raise ResumeContentError("Resume content must be a JSON object")

    personal = raw.get("personal") or raw.get("personalInfo")
    return {
        "personal": normalize_personal_info(personal),
        "experience": normalize_experience(raw.get("experience")),
        "education": normalize_education(raw.get("education")),
        "skills": normalize_skills(raw.get("skills")),
    }


def parse_resume_content(raw: Any) -> ResumeContent:
    """Normalize then validate stored content; raises ResumeContentError."""
    normalized = normalize_resume_content(raw)
    try:
        return ResumeContent.model_validate(normalized)
    except pydantic.ValidationError as e:
        raise ResumeContentError(f"Resume content has an unexpected shape: {e.error_count()} error(s)") from e
