from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from app.api.deps import get_db, require_user
from app.crud.crud_profile import get_profile
from app.schemas.ResumeSchemas import ProfileResponse
from app.services.auth_service import AuthUser

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def read_profile(user: AuthUser = Depends(require_user), db: Client = Depends(get_db)):
    profile = get_profile(db, user.id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileResponse(data=profile)
