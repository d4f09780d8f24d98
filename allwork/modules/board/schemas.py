from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from allwork.core.notifications import Notification
from allwork.modules.members.schemas import TeamMemberResponse
from allwork.modules.tasks.schemas import TaskResponse, TaskStatus


class BoardColumn(BaseModel):
    id: str  # droppable id, "user-<uuid>"
    member: TeamMemberResponse
    tasks: List[TaskResponse]


class BoardSnapshot(BaseModel):
    team_id: int
    team_name: str
    search: str = ""
    new_task_title: str = ""
    pulse: bool = False
    columns: List[BoardColumn]
    notifications: List[Notification] = []


class BoardAction(BaseModel):
    """One message from a connected board client"""
    action: str
    task_id: Optional[int] = None
    title: Optional[str] = None
    status: Optional[TaskStatus] = None
    dx: float = 0.0
    dy: float = 0.0
    target: Optional[str] = None
    query: Optional[str] = None
    fields: Dict[str, Any] = {}
