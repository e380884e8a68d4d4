"""
app/api/users.py

Purpose: User account endpoints

- Create a single user
- Reset a user's password
- Profile listing, editing, freezing and deletion
- Push token listing and pruning
"""

from fastapi import APIRouter, Depends, status

from app.api.deps import get_user_service
from app.schemas.users import (
    CreateUserRequest,
    PrunePushTokensRequest,
    ResetPasswordRequest,
    UserUpdateRequest,
)
from app.services.user_service import UserService

router = APIRouter()


@router.post("/create-user", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: CreateUserRequest,
    users: UserService = Depends(get_user_service),
):
    """
    Creates an auth account and its linked profile.

    Errors:
    - 400 DUPLICATE_EMAIL / INVALID_EMAIL / WEAK_PASSWORD
    """
    uid, user_data = await users.create_user(
        email=payload.email,
        password=payload.password,
        name=payload.name,
        phone_no=payload.phone_no,
        gender=payload.gender,
        organization=payload.organization,
    )
    return {
        "success": True,
        "uid": uid,
        "message": "User created successfully",
        "userData": user_data,
    }


@router.post("/reset-password")
async def reset_password(
    payload: ResetPasswordRequest,
    users: UserService = Depends(get_user_service),
):
    """Sets a new random password and returns it once."""
    password = await users.reset_password(payload.email)
    return {
        "success": True,
        "password": password,
        "message": "Password reset successfully",
    }


@router.get("/users")
async def list_users(users: UserService = Depends(get_user_service)):
    return {"users": [user.to_api() for user in await users.list_users()]}


@router.get("/users/with-push-tokens")
async def users_with_push_tokens(users: UserService = Depends(get_user_service)):
    """Users that can receive push notifications."""
    return {"users": [user.to_api() for user in await users.users_with_push_tokens()]}


@router.post("/users/prune-push-tokens")
async def prune_push_tokens(
    payload: PrunePushTokensRequest,
    users: UserService = Depends(get_user_service),
):
    """Clears push tokens reported invalid by a previous send."""
    cleared = await users.prune_push_tokens(payload.tokens)
    return {"success": True, "cleared": cleared}


@router.get("/users/{user_id}")
async def get_user(user_id: str, users: UserService = Depends(get_user_service)):
    return (await users.get_user(user_id)).to_api()


@router.patch("/users/{user_id}")
async def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    users: UserService = Depends(get_user_service),
):
    user = await users.update_user(user_id, payload.changes())
    return {"success": True, "user": user.to_api()}


@router.post("/users/{user_id}/freeze")
async def toggle_freeze(user_id: str, users: UserService = Depends(get_user_service)):
    """Freezes an active user or unfreezes a frozen one."""
    user = await users.toggle_freeze(user_id)
    return {"success": True, "user": user.to_api()}


@router.delete("/users/{user_id}")
async def delete_user(user_id: str, users: UserService = Depends(get_user_service)):
    await users.delete_user(user_id)
    return {"success": True, "message": "User deleted successfully"}
