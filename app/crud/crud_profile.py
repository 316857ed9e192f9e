from typing import Optional

from supabase import Client

from app.schemas.ResumeSchemas import Profile


def get_profile(db: Client, user_id: str) -> Optional[Profile]:
    result = db.table("profiles").select("*").eq("id", user_id).limit(1).execute()
    rows = result.data or []
    return Profile.model_validate(rows[0]) if rows else None
