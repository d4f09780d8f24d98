from fastapi import APIRouter, Depends
from allwork.database.supabase_client import get_supabase
from allwork.modules.tasks.schemas import TaskCreate, TaskUpdate, TaskResponse
from allwork.modules.tasks.service import TaskService
from allwork.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/tasks", tags=["tasks"])
team_tasks_router = APIRouter(prefix="/teams/{team_id}/tasks", tags=["tasks"])


def get_task_service(supabase: Client = Depends(get_supabase)) -> TaskService:
    return TaskService(supabase)


@team_tasks_router.get("", response_model=List[TaskResponse])
async def list_team_tasks(
    team_id: int,
    user_data: Dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    """List a team's tasks, newest first"""
    return service.list_tasks(team_id)


@team_tasks_router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    team_id: int,
    task_data: TaskCreate,
    user_data: Dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    """Add a todo task, assigned to the creator unless assignee_id is given"""
    return service.create_task(team_id, task_data, user_data["id"], user_data.get("email"))


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    user_data: Dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    return service.get_task(task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    task_data: TaskUpdate,
    user_data: Dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    """Update title, description, status, priority, due date or assignee"""
    return service.update_task(task_id, task_data)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: int,
    user_data: Dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service)
):
    service.delete_task(task_id)
    return None
