import logging
from supabase import Client
from allwork.modules.members.schemas import MemberRole, TeamMemberResponse
from allwork.modules.profiles.schemas import ProfileResponse
from allwork.modules.profiles.service import ProfileService
from typing import Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class MemberService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.profiles = ProfileService(supabase)

    def _load_profiles(self, user_ids: List[str]) -> Dict[str, ProfileResponse]:
        if not user_ids:
            return {}
        result = self.supabase.table("profiles")\
            .select("*")\
            .in_("id", user_ids)\
            .execute()
        return {p["id"]: ProfileResponse(**p) for p in result.data or []}

    def list_members(self, team_id: int) -> List[TeamMemberResponse]:
        """List team members with their profiles"""
        try:
            result = self.supabase.table("team_members")\
                .select("*")\
                .eq("team_id", team_id)\
                .execute()
            rows = result.data or []
            profiles = self._load_profiles([m["user_id"] for m in rows])
            return [
                TeamMemberResponse(
                    team_id=m["team_id"],
                    user_id=m["user_id"],
                    role=m.get("role") or MemberRole.MEMBER,
                    profile=profiles.get(m["user_id"]),
                )
                for m in rows
            ]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def ensure_members(self, team_id: int, viewer_id: str, viewer_email: Optional[str]) -> List[TeamMemberResponse]:
        """Members of the team; a team with none gets the viewer inserted as owner"""
        members = self.list_members(team_id)
        if members:
            return members
        logger.info(f"Team {team_id} has no members; adding {viewer_id} as owner")
        try:
            self.profiles.ensure_profile(viewer_id, viewer_email)
            self.supabase.table("team_members").insert({
                "team_id": team_id,
                "user_id": viewer_id,
                "role": MemberRole.OWNER.value
            }).execute()
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return self.list_members(team_id)

    def invite_by_email(self, team_id: int, email: str) -> TeamMemberResponse:
        """Add a registered user to the team as a member"""
        profile = self.profiles.get_profile_by_email(email)
        if profile is None:
            raise HTTPException(status_code=404, detail="User not found. They need to sign up first.")
        try:
            existing = self.supabase.table("team_members")\
                .select("user_id")\
                .eq("team_id", team_id)\
                .eq("user_id", profile.id)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail=f"{email} is already a member of this team")

            result = self.supabase.table("team_members").insert({
                "team_id": team_id,
                "user_id": profile.id,
                "role": MemberRole.MEMBER.value
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add member")

            return TeamMemberResponse(**result.data[0], profile=profile)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_member(self, team_id: int, user_id: str) -> bool:
        """Remove a member from the team; owners stay"""
        try:
            existing = self.supabase.table("team_members")\
                .select("role")\
                .eq("team_id", team_id)\
                .eq("user_id", user_id)\
                .execute()
            if not existing.data:
                raise HTTPException(status_code=404, detail="Member not found")
            if existing.data[0].get("role") == MemberRole.OWNER.value:
                raise HTTPException(status_code=400, detail="The team owner cannot be removed")

            result = self.supabase.table("team_members")\
                .delete()\
                .eq("team_id", team_id)\
                .eq("user_id", user_id)\
                .execute()

            return len(result.data or []) > 0
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
