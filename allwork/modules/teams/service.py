import logging
from supabase import Client
from allwork.modules.teams.schemas import TeamCreate, TeamUpdate, TeamResponse
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class TeamService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_team(self, team_data: TeamCreate, user_id: str) -> TeamResponse:
        """Create a new team"""
        try:
            result = self.supabase.table("teams").insert({
                "name": team_data.name
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create team")

            # Add creator as owner
            self.supabase.table("team_members").insert({
                "team_id": result.data[0]["id"],
                "user_id": user_id,
                "role": "owner"
            }).execute()

            logger.info(f"Team {result.data[0]['id']} created by {user_id}")
            return TeamResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_teams(self) -> List[TeamResponse]:
        """List all teams ordered by id"""
        try:
            result = self.supabase.table("teams")\
                .select("*")\
                .order("id")\
                .execute()
            return [TeamResponse(**team) for team in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def find_team(self, team_id: int) -> Optional[TeamResponse]:
        """Team by ID, or None when it does not exist"""
        try:
            result = self.supabase.table("teams")\
                .select("*")\
                .eq("id", team_id)\
                .limit(1)\
                .execute()

            if not result.data:
                return None

            return TeamResponse(**result.data[0])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_team_by_id(self, team_id: int) -> TeamResponse:
        """Get team by ID"""
        team = self.find_team(team_id)
        if team is None:
            raise HTTPException(status_code=404, detail="Team not found")
        return team

    def update_team(self, team_id: int, team_data: TeamUpdate) -> TeamResponse:
        """Rename team"""
        try:
            result = self.supabase.table("teams")\
                .update({"name": team_data.name})\
                .eq("id", team_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Team not found")

            return TeamResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def count_tasks(self, team_id: int) -> int:
        """Number of tasks the team still owns"""
        try:
            result = self.supabase.table("tasks")\
                .select("id", count="exact")\
                .eq("team_id", team_id)\
                .execute()
            if result.count is not None:
                return result.count
            return len(result.data or [])
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_team(self, team_id: int) -> bool:
        """Delete team; refused while any task still belongs to it"""
        task_count = self.count_tasks(team_id)
        if task_count > 0:
            raise HTTPException(
                status_code=409,
                detail=f"Cannot delete team: {task_count} task(s) remain. Delete or move them first."
            )
        try:
            # Delete team members first
            self.supabase.table("team_members")\
                .delete()\
                .eq("team_id", team_id)\
                .execute()

            result = self.supabase.table("teams")\
                .delete()\
                .eq("id", team_id)\
                .execute()

            logger.info(f"Team {team_id} deleted")
            return len(result.data or []) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
