# user_accounts/routers/auth_router.py
from fastapi import APIRouter, Depends, HTTPException, status
import structlog
import os

from ..dependencies.services import get_user_service
from ..dependencies.auth import get_reset_user_id
from ..UAA.services import UserService
from ..UAA.errors import AccountError
from ..UAA.schemas import (
    ConfirmCodeRequest,
    LoginRequest,
    RequestCode,
    ResetPasswordRequest,
    ResetToken,
    Token,
    UserCreate,
    UserRead,
)

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _code_sent(code: str) -> dict:
    # echoed only when ENVIRONMENT is explicitly "development"
    if os.getenv("ENVIRONMENT", "production").lower() == "development":
        return {"status": "sent", "method": "email", "otp": code}
    return {"status": "sent", "method": "email"}


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, svc: UserService = Depends(get_user_service)):
    try:
        return await svc.register_user(user_in)
    except AccountError as e:
        logger.info("register_failed", error=str(e), email=user_in.email)
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.post("/login", response_model=Token)
async def login(form_data: LoginRequest, svc: UserService = Depends(get_user_service)):
    try:
        return await svc.authenticate_user(form_data)
    except AccountError as e:
        logger.warning("login_failed", reason=str(e), username=form_data.username)
        raise HTTPException(status_code=e.status_code, detail=str(e))

# ---------- email confirmation ----------
@router.post("/confirm-email/request", status_code=status.HTTP_202_ACCEPTED)
async def confirm_email_request(payload: RequestCode, svc: UserService = Depends(get_user_service)):
    try:
        code = await svc.send_confirmation_code(payload.email)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return _code_sent(code)

@router.post("/confirm-email")
async def confirm_email(payload: ConfirmCodeRequest, svc: UserService = Depends(get_user_service)):
    try:
        await svc.confirm_email(payload)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"confirmed": True}

# ---------- password reset ----------
@router.post("/forgot-password", status_code=status.HTTP_202_ACCEPTED)
async def forgot_password(payload: RequestCode, svc: UserService = Depends(get_user_service)):
    try:
        await svc.request_password_reset(payload.email)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    # a reset code only ever travels by e-mail
    return {"status": "sent", "method": "email"}

@router.post("/forgot-password/confirm", response_model=ResetToken)
async def confirm_reset_code(payload: ConfirmCodeRequest, svc: UserService = Depends(get_user_service)):
    try:
        return await svc.confirm_reset_password_code(payload)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.post("/reset-password", status_code=status.HTTP_204_NO_CONTENT)
async def reset_password(
    payload: ResetPasswordRequest,
    user_id: str = Depends(get_reset_user_id),
    svc: UserService = Depends(get_user_service),
):
    try:
        await svc.reset_password(user_id, payload)
    except AccountError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
