from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime


def _require_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Team name is required")
    return value


class TeamCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _require_name(value)


class TeamUpdate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _require_name(value)


class TeamResponse(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TeamListAction(BaseModel):
    """One message from a connected team list client"""
    action: str
    name: Optional[str] = None
    team_id: Optional[int] = None
    dx: float = 0.0
    dy: float = 0.0
    target: Optional[str] = None
