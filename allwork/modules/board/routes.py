import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from allwork.database.supabase_client import get_supabase
from allwork.database.realtime import TaskChangeFeed
from allwork.modules.auth.service import AuthService
from allwork.modules.board.schemas import BoardAction, BoardSnapshot
from allwork.modules.board.session import BoardSession
from allwork.modules.tasks.schemas import TaskUpdate
from allwork.core.dependencies import get_auth_service, get_current_user, authenticate_websocket
from allwork.core.drag import DragOutcome
from supabase import Client
from typing import Dict, Optional

logger = logging.getLogger(__name__)

router = APIRouter(tags=["board"])
socket_router = APIRouter(tags=["board"])


def get_task_feed() -> TaskChangeFeed:
    return TaskChangeFeed()


@router.get("/teams/{team_id}/board", response_model=BoardSnapshot)
async def get_board(
    team_id: int,
    q: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase)
):
    """One-shot board: columns per member with tasks filtered by title"""
    session = BoardSession(team_id, user_data, supabase)
    await session.refresh()
    if session.redirect_to:
        raise HTTPException(status_code=404, detail="Team not found")
    session.set_search(q)
    return session.snapshot()


class BoardConnection:
    """Serialises sends on one socket; realtime pushes and action replies share it."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.closed = False
        self._lock = asyncio.Lock()

    async def send(self, message: Dict) -> None:
        async with self._lock:
            if self.closed:
                return
            await self.websocket.send_json(message)

    async def navigate(self, to: str) -> None:
        async with self._lock:
            if self.closed:
                return
            self.closed = True
            await self.websocket.send_json({"type": "navigate", "to": to})
            await self.websocket.close()

    async def send_snapshot(self, session: BoardSession) -> bool:
        """Push the board; a session that lost its team navigates away and closes instead"""
        if session.redirect_to:
            await self.navigate(session.redirect_to)
            return False
        await self.send({"type": "snapshot", **session.snapshot().model_dump(mode="json")})
        return True


async def dispatch_action(session: BoardSession, connection: BoardConnection, action: BoardAction) -> None:
    if action.action == "add_task":
        await session.add_task(action.title or "")
    elif action.action == "set_status" and action.task_id is not None and action.status is not None:
        await session.change_status(action.task_id, action.status)
    elif action.action == "delete_task" and action.task_id is not None:
        await session.delete_task(action.task_id)
    elif action.action == "drag_end" and action.task_id is not None:
        resolution = await session.drag_end(action.task_id, action.dx, action.dy, action.target)
        if resolution.outcome == DragOutcome.CLICK:
            task = session.find_task(action.task_id)
            if task is not None:
                await connection.send({"type": "open_task", "task": task.model_dump(mode="json")})
    elif action.action == "save_task" and action.task_id is not None:
        await session.save_task(action.task_id, TaskUpdate(**action.fields))
    elif action.action == "search":
        session.set_search(action.query)
    elif action.action == "refresh":
        await session.refresh()
    else:
        await connection.send({"type": "error", "detail": f"Unsupported action: {action.action}"})


@socket_router.websocket("/ws/board/{team_id}")
async def board_socket(
    websocket: WebSocket,
    team_id: int,
    token: Optional[str] = None,
    auth_service: AuthService = Depends(get_auth_service),
    supabase: Client = Depends(get_supabase),
    feed: TaskChangeFeed = Depends(get_task_feed)
):
    """Live board: one realtime subscription per connection, removed on disconnect"""
    user = await authenticate_websocket(websocket, token, auth_service)
    if user is None:
        return

    connection = BoardConnection(websocket)
    session = BoardSession(team_id, user, supabase, feed=feed, on_change=connection.send_snapshot)
    await session.mount()
    try:
        if not await connection.send_snapshot(session):
            return
        while True:
            message = await websocket.receive_json()
            try:
                action = BoardAction.model_validate(message)
                await dispatch_action(session, connection, action)
            except ValidationError as e:
                await connection.send({"type": "error", "detail": str(e)})
                continue
            if not await connection.send_snapshot(session):
                return
    except WebSocketDisconnect:
        logger.debug(f"Board socket for team {team_id} disconnected")
    finally:
        await session.unmount()
