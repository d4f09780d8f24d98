"""
Core dependencies for route protection
"""

from fastapi import Depends, Security, WebSocket
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from allwork.database.supabase_client import get_supabase
from allwork.modules.auth.service import AuthService
from allwork.core.session import AuthSession, LOGIN_PATH
from supabase import Client
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Auth gate: every protected route depends on this; unauthenticated callers get 401"""
    return auth_service.get_current_user(token)


async def authenticate_websocket(websocket: WebSocket, token: Optional[str], auth_service: AuthService) -> Optional[Dict[str, Any]]:
    """Auth gate for sockets: accept, restore the session, or tell the client to log in and close"""
    await websocket.accept()
    session = AuthSession(auth_service)
    user = await run_in_threadpool(session.restore, token)
    if user is None:
        await websocket.send_json({"type": "navigate", "to": LOGIN_PATH})
        await websocket.close(code=4401)
    return user
