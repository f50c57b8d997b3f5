# user_accounts/routers/user_router.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
import structlog

from ..dependencies.auth import get_current_user_id
from ..dependencies.services import get_user_service
from ..UAA.services import UserService
from ..UAA.errors import AccountError
from ..UAA.schemas import UpdatePasswordRequest, UserInfoRead, UserRead, UserUpdate

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
async def me(current_user_id: str = Depends(get_current_user_id), svc: UserService = Depends(get_user_service)):
    try:
        return await svc.get_user(current_user_id)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.get("/", response_model=List[UserRead])
async def list_users(current_user_id: str = Depends(get_current_user_id), svc: UserService = Depends(get_user_service)):
    return await svc.list_users()

@router.get("/search", response_model=List[UserInfoRead])
async def search_users(
    q: str = Query(..., min_length=1, max_length=75),
    current_user_id: str = Depends(get_current_user_id),
    svc: UserService = Depends(get_user_service),
):
    return await svc.search_users(q)

@router.get("/by-email/{email}", response_model=UserRead)
async def get_by_email(email: str, current_user_id: str = Depends(get_current_user_id), svc: UserService = Depends(get_user_service)):
    try:
        return await svc.get_user_by_email(email)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.get("/by-username/{username}", response_model=UserRead)
async def get_by_username(username: str, current_user_id: str = Depends(get_current_user_id), svc: UserService = Depends(get_user_service)):
    try:
        return await svc.get_user_by_username(username)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: str, current_user_id: str = Depends(get_current_user_id), svc: UserService = Depends(get_user_service)):
    try:
        return await svc.get_user(user_id)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    current_user_id: str = Depends(get_current_user_id),
    svc: UserService = Depends(get_user_service),
):
    try:
        svc.check_user_id_match(current_user_id, user_id)
        return await svc.update_user(user_id, payload)
    except AccountError as e:
        logger.info("user_update_failed", user_id=user_id, error=str(e))
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, current_user_id: str = Depends(get_current_user_id), svc: UserService = Depends(get_user_service)):
    try:
        svc.check_user_id_match(current_user_id, user_id)
        await svc.delete_user(user_id)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.put("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
async def update_password(
    user_id: str,
    payload: UpdatePasswordRequest,
    current_user_id: str = Depends(get_current_user_id),
    svc: UserService = Depends(get_user_service),
):
    try:
        svc.check_user_id_match(current_user_id, user_id)
        await svc.update_password(user_id, payload)
    except AccountError as e:
        logger.info("password_update_failed", user_id=user_id, error=str(e))
        raise HTTPException(status_code=e.status_code, detail=str(e))
