import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError
from supabase import Client

from allwork.core.drag import DragOutcome, DragResolution, resolve_drop
from allwork.core.notifications import Notifier
from allwork.modules.teams.schemas import TeamCreate, TeamResponse
from allwork.modules.teams.service import TeamService

logger = logging.getLogger(__name__)


def board_path(team_id: int) -> str:
    return f"/board/{team_id}"


class TeamListSession:
    """Team list view state: create, open and drag-to-trash delete with confirmation."""

    def __init__(
        self,
        user: Dict[str, Any],
        supabase: Client,
        notifier: Optional[Notifier] = None,
    ):
        self.user = user
        self.service = TeamService(supabase)
        self.notifier = notifier or Notifier()

        self.teams: List[TeamResponse] = []
        self.new_team_name = ""
        self.pending_delete: Optional[TeamResponse] = None
        self.navigate_to: Optional[str] = None

    async def load(self) -> None:
        try:
            self.teams = await run_in_threadpool(self.service.list_teams)
        except HTTPException as e:
            self.notifier.error("Could not load teams", e.detail)

    async def create_team(self, name: str) -> Optional[TeamResponse]:
        try:
            team_data = TeamCreate(name=name or "")
        except ValidationError:
            self.notifier.warning("Please name the team first")
            return None
        try:
            team = await run_in_threadpool(self.service.create_team, team_data, self.user["id"])
        except HTTPException as e:
            self.notifier.error(f"Could not create team: {e.detail}")
            return None
        self.notifier.success(f'Team "{team.name}" created')
        self.new_team_name = ""
        await self.load()
        return team

    async def drag_end(self, team_id: int, dx: float, dy: float, target: Optional[str]) -> DragResolution:
        resolution = resolve_drop(dx, dy, target)
        if resolution.outcome == DragOutcome.CLICK:
            self.navigate_to = board_path(team_id)
        elif resolution.outcome == DragOutcome.DELETE:
            # Deleting a team is destructive; ask first
            self.pending_delete = next((t for t in self.teams if t.id == team_id), None)
        return resolution

    def cancel_delete(self) -> None:
        self.pending_delete = None

    async def confirm_delete(self) -> bool:
        team, self.pending_delete = self.pending_delete, None
        if team is None:
            return False
        try:
            await run_in_threadpool(self.service.delete_team, team.id)
        except HTTPException as e:
            self.notifier.error(f"Could not delete team: {e.detail}")
            return False
        self.notifier.success(f'Team "{team.name}" deleted')
        await self.load()
        return True

    def snapshot(self) -> Dict[str, Any]:
        return {
            "teams": [t.model_dump(mode="json") for t in self.teams],
            "new_team_name": self.new_team_name,
            "pending_delete": self.pending_delete.model_dump(mode="json") if self.pending_delete else None,
            "navigate_to": self.navigate_to,
            "notifications": [n.model_dump(mode="json") for n in self.notifier.drain()],
        }
