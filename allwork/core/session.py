"""
Session manager for long-lived clients (board sockets).

Holds the signed-in user explicitly instead of relying on ambient global state:
restore on load, clear on sign-out.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException

from allwork.modules.auth.schemas import LoginRequest, RegisterRequest, RegisterResponse
from allwork.modules.auth.service import AuthService

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


class AuthSession:
    def __init__(self, auth_service: AuthService):
        self.auth_service = auth_service
        self.user: Optional[Dict[str, Any]] = None
        self.access_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def restore(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        """Rebuild the session from a stored token; a bad token leaves the session signed out"""
        if not token:
            self.clear()
            return None
        try:
            self.user = self.auth_service.get_current_user(token)
            self.access_token = token
        except HTTPException as e:
            logger.info(f"Session restore rejected: {e.detail}")
            self.clear()
        return self.user

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        token = self.auth_service.login(LoginRequest(email=email, password=password))
        self.access_token = token.access_token
        self.user = {"id": token.user_id, "email": token.email}
        return self.user

    def sign_up(self, email: str, password: str) -> RegisterResponse:
        # Sign-up does not sign in; the user logs in afterwards
        return self.auth_service.register(RegisterRequest(email=email, password=password))

    def sign_out(self) -> str:
        """Clear the session and return where the client should go next"""
        if self.access_token:
            self.auth_service.logout(self.access_token)
        self.clear()
        return LOGIN_PATH

    def clear(self) -> None:
        self.user = None
        self.access_token = None

    def require_user(self) -> Dict[str, Any]:
        if self.user is None:
            raise HTTPException(status_code=401, detail="Not authenticated")
        return self.user
