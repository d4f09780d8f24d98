from pydantic import BaseModel, EmailStr
from typing import Optional
from enum import Enum
from allwork.modules.profiles.schemas import ProfileResponse


class MemberRole(str, Enum):
    OWNER = "owner"
    MEMBER = "member"


class MemberInvite(BaseModel):
    email: EmailStr


class TeamMemberResponse(BaseModel):
    team_id: int
    user_id: str
    role: MemberRole = MemberRole.MEMBER
    profile: Optional[ProfileResponse] = None

    class Config:
        from_attributes = True
