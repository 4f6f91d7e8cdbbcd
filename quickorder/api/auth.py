"""Authentication endpoints and utilities for the admin console."""
import logging
from fastapi import APIRouter, Request, Response, HTTPException
from pydantic import BaseModel
from typing import Dict, Optional
import secrets
from datetime import datetime, timedelta, timezone

from quickorder.core.config import settings

router = APIRouter()
logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_token"
SESSION_TTL = timedelta(hours=24)


class AdminSession(BaseModel):
    """A logged-in admin session."""
    authenticated: bool = True
    created_at: datetime
    expires_at: datetime


# In-memory session storage; sessions do not survive a restart
_sessions: Dict[str, AdminSession] = {}


class LoginRequest(BaseModel):
    """Login request model."""
    password: str


class SessionInfo(BaseModel):
    """Session information response."""
    authenticated: bool
    expires_at: Optional[str] = None


def create_session_token() -> str:
    """Generate a secure session token."""
    return secrets.token_urlsafe(32)


def create_session(response: Response) -> str:
    """Create a new session and set cookie."""
    session_token = create_session_token()
    now = datetime.now(timezone.utc)
    session = AdminSession(created_at=now, expires_at=now + SESSION_TTL)
    _sessions[session_token] = session

    # HTTP-only cookie
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_token,
        httponly=True,
        max_age=int(SESSION_TTL.total_seconds()),
        samesite="lax"
    )
    return session_token


def get_session_token(request: Request) -> Optional[str]:
    """Extract session token from cookie."""
    return request.cookies.get(SESSION_COOKIE)


def verify_session(session_token: Optional[str]) -> bool:
    """Verify if session token is valid and not expired."""
    if not session_token:
        return False

    session = _sessions.get(session_token)
    if not session:
        return False

    if datetime.now(timezone.utc) > session.expires_at:
        del _sessions[session_token]
        return False

    return session.authenticated


async def require_auth(request: Request) -> bool:
    """Dependency to require an admin session."""
    session_token = get_session_token(request)
    if not verify_session(session_token):
        raise HTTPException(status_code=401, detail="Authentication required")
    return True


@router.post("/api/auth/login")
async def login(login_req: LoginRequest, response: Response):
    """Login endpoint."""
    if not secrets.compare_digest(login_req.password.encode(), settings.dashboard_password.encode()):
        logger.warning("[AUTH] Login failed - invalid password")
        raise HTTPException(status_code=401, detail="Invalid password")

    session_token = create_session(response)
    logger.info("[AUTH] Admin logged in")

    return {
        "success": True,
        "message": "Login successful",
        "expires_at": _sessions[session_token].expires_at.isoformat()
    }


@router.post("/api/auth/logout")
async def logout(request: Request, response: Response):
    """Logout endpoint."""
    session_token = get_session_token(request)
    if session_token and session_token in _sessions:
        del _sessions[session_token]

    response.delete_cookie(SESSION_COOKIE)

    return {"success": True, "message": "Logged out"}


@router.get("/api/auth/session")
async def get_session_info(request: Request) -> SessionInfo:
    """Get current session information."""
    session_token = get_session_token(request)

    if verify_session(session_token):
        session = _sessions[session_token]
        return SessionInfo(
            authenticated=True,
            expires_at=session.expires_at.isoformat()
        )

    return SessionInfo(authenticated=False)
