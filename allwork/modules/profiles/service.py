import logging
from datetime import datetime, timezone
from supabase import Client
from allwork.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from typing import Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def derive_display_name(first_name: Optional[str], last_name: Optional[str], email: Optional[str]) -> str:
    """'First Last' with blanks trimmed, else the local part of the email."""
    full_name = f"{first_name or ''} {last_name or ''}".strip()
    if full_name:
        return full_name
    return (email or "").split("@")[0]


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get profile by user ID"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_profile_by_email(self, email: str) -> Optional[ProfileResponse]:
        """Exact email match; None when nobody registered with it"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("email", email)\
                .limit(1)\
                .execute()

            if not result.data:
                return None

            return ProfileResponse(**result.data[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def save_profile(self, user_id: str, email: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Upsert the user's own profile and recompute display_name"""
        try:
            updates = {
                "id": user_id,
                "email": email,
                "first_name": profile_data.first_name,
                "last_name": profile_data.last_name,
                "position": profile_data.position,
                "display_name": derive_display_name(profile_data.first_name, profile_data.last_name, email),
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
            result = self.supabase.table("profiles").upsert(updates).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save profile")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def ensure_profile(self, user_id: str, email: Optional[str]) -> None:
        """Insert a minimal profile when the user has none yet; tasks and members reference it"""
        try:
            existing = self.supabase.table("profiles")\
                .select("id")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
            if existing.data:
                return

            logger.info(f"Creating missing profile for user {user_id}")
            self.supabase.table("profiles").upsert({
                "id": user_id,
                "email": email,
                "display_name": derive_display_name(None, None, email),
            }).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
