from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from blogapi.core.rate_limiter import rate_limit_ip
from blogapi.schemas import LoginRequest, RegisterRequest
from blogapi.services.auth_service import (
    AccountExistsError,
    AuthService,
    InvalidCredentialsError,
    RegistrationError,
)
from blogapi.services.session_service import bearer_token, require_user_id
from blogapi.services.user_service import serialize_user

router = APIRouter(prefix="/auth", tags=["auth"])
auth_service = AuthService()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, request: Request):
    rate_limit_ip(request, "auth:register", limit=10, window_seconds=300)
    try:
        user = auth_service.register(payload.email, payload.password, payload.full_name)
    except RegistrationError as exc:
        raise HTTPException(400, exc.message)
    except AccountExistsError as exc:
        raise HTTPException(409, str(exc))
    return {"message": "user registered successfully", "user": serialize_user(user)}


@router.post("/login")
def login(payload: LoginRequest, request: Request):
    rate_limit_ip(request, "auth:login", limit=10, window_seconds=300)
    try:
        result = auth_service.login(payload.email, payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(401, str(exc))
    return {
        "token": result.session_token,
        "token_type": "bearer",
        "user": serialize_user(result.user),
    }


@router.post("/logout")
def logout(token: str = Depends(bearer_token), user_id: str = Depends(require_user_id)):
    auth_service.logout(token)
    return {"message": "logged out"}
