from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client

from app.schemas.ResumeSchemas import Resume, ResumeCreate, ResumeUpdate

TABLE = "resumes"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_resumes(db: Client, user_id: str, skip: int = 0, limit: int = 100) -> List[Resume]:
    """Resumes owned by `user_id`, newest first."""
    result = (
        db.table(TABLE)
        .select("*")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .range(skip, skip + limit - 1)
        .execute()
    )
    return [Resume.model_validate(row) for row in result.data or []]


def get_resume(db: Client, resume_id: str, user_id: str) -> Optional[Resume]:
    """A resume the user may read: their own, or any public one."""
    result = (
        db.table(TABLE)
        .select("*")
        .eq("id", resume_id)
        .or_(f"user_id.eq.{user_id},is_public.eq.true")
        .limit(1)
        .execute()
    )
    rows = result.data or []
    return Resume.model_validate(rows[0]) if rows else None


def get_owned_resume(db: Client, resume_id: str, user_id: str) -> Optional[Resume]:
    result = (
        db.table(TABLE)
        .select("*")
        .eq("id", resume_id)
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )
    rows = result.data or []
    return Resume.model_validate(rows[0]) if rows else None


def create_resume(db: Client, user_id: str, resume_in: ResumeCreate) -> Resume:
    """
    Create a new resume owned by `user_id`.
    """
    row: Dict[str, Any] = {
        "user_id": user_id,
        "title": resume_in.title,
        "content": resume_in.content.model_dump(),
        "is_public": resume_in.is_public,
    }
    result = db.table(TABLE).insert(row).execute()
    return Resume.model_validate(result.data[0])


def update_resume(db: Client, resume_id: str, user_id: str, resume_in: ResumeUpdate) -> Optional[Resume]:
    changes = resume_in.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return get_owned_resume(db, resume_id, user_id)
    changes["updated_at"] = _now()
    result = db.table(TABLE).update(changes).eq("id", resume_id).eq("user_id", user_id).execute()
    rows = result.data or []
    return Resume.model_validate(rows[0]) if rows else None


def delete_resume(db: Client, resume_id: str, user_id: str) -> bool:
    result = db.table(TABLE).delete().eq("id", resume_id).eq("user_id", user_id).execute()
    return bool(result.data)
