from fastapi import APIRouter, Depends
from allwork.database.supabase_client import get_supabase
from allwork.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from allwork.modules.profiles.service import ProfileService
from allwork.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Load the current user's profile, creating a blank one on first visit"""
    service.ensure_profile(current_user["id"], current_user.get("email"))
    return service.get_profile(current_user["id"])


@router.put("/me", response_model=ProfileResponse)
async def save_my_profile(
    profile_data: ProfileUpdate,
    current_user: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Save name and position; display_name is derived"""
    return service.save_profile(current_user["id"], current_user.get("email"), profile_data)
