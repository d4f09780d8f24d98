import logging
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from allwork.database.supabase_client import get_supabase
from allwork.modules.teams.schemas import TeamCreate, TeamUpdate, TeamResponse, TeamListAction
from allwork.modules.teams.service import TeamService
from allwork.modules.teams.list_session import TeamListSession
from allwork.modules.auth.service import AuthService
from allwork.core.dependencies import get_auth_service, get_current_user, authenticate_websocket
from supabase import Client
from typing import List, Dict, Optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["teams"])


def get_team_service(supabase: Client = Depends(get_supabase)) -> TeamService:
    return TeamService(supabase)


@router.post("", response_model=TeamResponse, status_code=201)
async def create_team(
    team_data: TeamCreate,
    user_data: Dict = Depends(get_current_user),
    service: TeamService = Depends(get_team_service)
):
    """Create a new team; the creator becomes its owner"""
    return service.create_team(team_data, user_data["id"])


@router.get("", response_model=List[TeamResponse])
async def list_teams(
    user_data: Dict = Depends(get_current_user),
    service: TeamService = Depends(get_team_service)
):
    """List all teams ordered by id"""
    return service.list_teams()


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: int,
    user_data: Dict = Depends(get_current_user),
    service: TeamService = Depends(get_team_service)
):
    return service.get_team_by_id(team_id)


@router.put("/{team_id}", response_model=TeamResponse)
async def update_team(
    team_id: int,
    team_data: TeamUpdate,
    user_data: Dict = Depends(get_current_user),
    service: TeamService = Depends(get_team_service)
):
    return service.update_team(team_id, team_data)


@router.delete("/{team_id}", status_code=204)
async def delete_team(
    team_id: int,
    user_data: Dict = Depends(get_current_user),
    service: TeamService = Depends(get_team_service)
):
    """Delete team (409 while it still has tasks)"""
    service.delete_team(team_id)
    return None


socket_router = APIRouter(tags=["teams"])


async def dispatch_action(session: TeamListSession, websocket: WebSocket, action: TeamListAction) -> bool:
    """Apply one client action; False when it was not understood"""
    if action.action == "create_team":
        await session.create_team(action.name or "")
    elif action.action == "drag_end" and action.team_id is not None:
        await session.drag_end(action.team_id, action.dx, action.dy, action.target)
    elif action.action == "confirm_delete":
        await session.confirm_delete()
    elif action.action == "cancel_delete":
        session.cancel_delete()
    elif action.action == "refresh":
        await session.load()
    else:
        await websocket.send_json({"type": "error", "detail": f"Unsupported action: {action.action}"})
        return False
    return True


@socket_router.websocket("/ws/teams")
async def team_list_socket(
    websocket: WebSocket,
    token: Optional[str] = None,
    auth_service: AuthService = Depends(get_auth_service),
    supabase: Client = Depends(get_supabase)
):
    """Live team list: create, open, drag to trash, confirm or cancel delete"""
    user = await authenticate_websocket(websocket, token, auth_service)
    if user is None:
        return

    session = TeamListSession(user, supabase)
    await session.load()
    try:
        await websocket.send_json({"type": "snapshot", **session.snapshot()})
        while True:
            message = await websocket.receive_json()
            try:
                action = TeamListAction.model_validate(message)
            except ValidationError as e:
                await websocket.send_json({"type": "error", "detail": str(e)})
                continue
            if not await dispatch_action(session, websocket, action):
                continue
            await websocket.send_json({"type": "snapshot", **session.snapshot()})
            session.navigate_to = None
    except WebSocketDisconnect:
        logger.debug("Team list socket disconnected")