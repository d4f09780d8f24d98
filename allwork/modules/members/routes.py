from fastapi import APIRouter, Depends
from allwork.database.supabase_client import get_supabase
from allwork.modules.members.schemas import MemberInvite, TeamMemberResponse
from allwork.modules.members.service import MemberService
from allwork.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/teams/{team_id}/members", tags=["members"])


def get_member_service(supabase: Client = Depends(get_supabase)) -> MemberService:
    return MemberService(supabase)


@router.get("", response_model=List[TeamMemberResponse])
async def list_members(
    team_id: int,
    user_data: Dict = Depends(get_current_user),
    service: MemberService = Depends(get_member_service)
):
    """List all members of a team"""
    return service.list_members(team_id)


@router.post("", response_model=TeamMemberResponse, status_code=201)
async def invite_member(
    team_id: int,
    invite: MemberInvite,
    user_data: Dict = Depends(get_current_user),
    service: MemberService = Depends(get_member_service)
):
    """Invite a registered user by exact email"""
    return service.invite_by_email(team_id, invite.email)


@router.delete("/{user_id}", status_code=204)
async def remove_member(
    team_id: int,
    user_id: str,
    user_data: Dict = Depends(get_current_user),
    service: MemberService = Depends(get_member_service)
):
    service.remove_member(team_id, user_id)
    return None
