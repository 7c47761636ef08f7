"""Session helpers (issue bearer tokens, validation, auth dependency)."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from blogapi.core.config import get_settings
from blogapi.core.security import new_session_token
from blogapi.repositories.sql_repository import SQLRepository

bearer = HTTPBearer(auto_error=False, description="Session token returned by /auth/login")
_repo = SQLRepository()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC.
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


def issue_session(user_id: str) -> str:
    """Create a new session token and persist it in the SQL store."""
    token = new_session_token()
    settings = get_settings()
    ttl = max(60, settings.session_ttl_seconds)
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)
    _repo.create_session(token, user_id, expires_at)
    return token


def user_id_for_token(token: str | None) -> str | None:
    """Return the user id bound to a session token, dropping expired sessions."""
    if not token:
        return None
    entity = _repo.get_session(token)
    if not entity:
        return None
    if entity.expires_at and _as_utc(entity.expires_at) < datetime.now(timezone.utc):
        _repo.delete_session(token)
        return None
    return entity.user_id


def delete_session(token: str) -> None:
    """Remove a session token from the persistent store."""
    if not token:
        return
    _repo.delete_session(token)


def bearer_token(credentials: HTTPAuthorizationCredentials | None = Depends(bearer)) -> str:
    if not credentials or (credentials.scheme or "").lower() != "bearer" or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization token missing",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def require_user_id(token: str = Depends(bearer_token)) -> str:
    """FastAPI dependency: resolve the bearer token to the caller's user id."""
    user_id = user_id_for_token(token)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id
