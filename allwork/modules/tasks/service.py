import logging
from supabase import Client
from allwork.modules.tasks.schemas import TaskCreate, TaskUpdate, TaskResponse, TaskStatus
from allwork.modules.profiles.service import ProfileService
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_tasks(self, team_id: int) -> List[TaskResponse]:
        """Tasks of a team, newest first"""
        try:
            result = self.supabase.table("tasks")\
                .select("*")\
                .eq("team_id", team_id)\
                .order("created_at", desc=True)\
                .execute()
            return [TaskResponse(**task) for task in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_task(self, task_id: int) -> TaskResponse:
        try:
            result = self.supabase.table("tasks")\
                .select("*")\
                .eq("id", task_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Task not found")

            return TaskResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_task(self, team_id: int, task_data: TaskCreate, user_id: str, user_email: Optional[str] = None) -> TaskResponse:
        """Insert a todo task; the creator's profile must exist first"""
        ProfileService(self.supabase).ensure_profile(user_id, user_email)
        try:
            payload = task_data.model_dump(mode="json")
            payload.update({
                "status": TaskStatus.TODO.value,
                "assignee_id": task_data.assignee_id or user_id,
                "team_id": team_id,
            })
            result = self.supabase.table("tasks").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create task")

            return TaskResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_task(self, task_id: int, task_data: TaskUpdate) -> TaskResponse:
        """Update only the fields that were provided"""
        update_data: Dict[str, Any] = task_data.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            return self.get_task(task_id)
        try:
            result = self.supabase.table("tasks")\
                .update(update_data)\
                .eq("id", task_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Task not found")

            return TaskResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def set_status(self, task_id: int, status: TaskStatus) -> TaskResponse:
        return self.update_task(task_id, TaskUpdate(status=status))

    def reassign(self, task_id: int, assignee_id: str) -> TaskResponse:
        return self.update_task(task_id, TaskUpdate(assignee_id=assignee_id))

    def delete_task(self, task_id: int) -> bool:
        try:
            result = self.supabase.table("tasks")\
                .delete()\
                .eq("id", task_id)\
                .execute()
            return len(result.data or []) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
