from fastapi import APIRouter, Depends, HTTPException

from blogapi.schemas import ProfileUpdateRequest
from blogapi.services.session_service import require_user_id
from blogapi.services.user_service import (
    InvalidUserIdError,
    ProfileValidationError,
    UserNotFoundError,
    UserService,
    serialize_user,
)

router = APIRouter(prefix="/users", tags=["users"])
user_service = UserService()


def _get_or_raise(user_id: str):
    try:
        return user_service.get_user(user_id)
    except InvalidUserIdError as exc:
        raise HTTPException(400, str(exc))
    except UserNotFoundError as exc:
        raise HTTPException(404, str(exc))


@router.get("")
def list_users():
    return {"users": [serialize_user(user) for user in user_service.list_users()]}


@router.get("/me")
def me(user_id: str = Depends(require_user_id)):
    return serialize_user(_get_or_raise(user_id))


@router.put("/me")
def update_me(payload: ProfileUpdateRequest, user_id: str = Depends(require_user_id)):
    _get_or_raise(user_id)
    try:
        user = user_service.update_profile(user_id, full_name=payload.full_name, bio=payload.bio)
    except ProfileValidationError as exc:
        raise HTTPException(400, str(exc))
    return serialize_user(user)


@router.get("/{user_id}")
def get_user(user_id: str):
    return serialize_user(_get_or_raise(user_id))
