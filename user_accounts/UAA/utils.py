# user_accounts/UAA/utils.py
import os
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

import structlog
from passlib.context import CryptContext
from jose import jwt, JOSEError, JWTError, ExpiredSignatureError

from .errors import (
    HashPasswordError,
    InvalidTokenError,
    TokenExpiredError,
    TokenGenerationError,
    TokenSubjectError,
    UnexpectedSigningMethodError,
    InvalidInputError,
)

logger = structlog.get_logger(__name__)

# Config (env)
SECRET_KEY = os.getenv("SECRET_KEY", "change_me_now")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "10"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

ACCESS_TOKEN_TYPE = "access"
RESET_TOKEN_TYPE = "reset"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

# --- Password utilities ---
PASSWORD_MIN_LENGTH = 6
PASSWORD_SPECIAL_CHARS = "!@#&?"

def hash_password(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except Exception as e:
        logger.exception("password_hash_failed", error=str(e))
        raise HashPasswordError() from e

def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except Exception as e:
        logger.exception("password_verify_failed", exc=e)
        return False

def assert_password_policy(password: str) -> None:
    if password is None or len(password) < PASSWORD_MIN_LENGTH:
        raise InvalidInputError(f"password must be at least {PASSWORD_MIN_LENGTH} characters")
    if not any(c in PASSWORD_SPECIAL_CHARS for c in password):
        raise InvalidInputError("password must include one of " + " ".join(PASSWORD_SPECIAL_CHARS))

# --- Emails ---
def normalize_email(email: str) -> str:
    return email.strip().lower()

# --- JWT helpers ---
def _now() -> datetime:
    return datetime.now(timezone.utc)

def _create_token(subject: str, token_type: str, expires_delta: timedelta) -> Dict[str, Any]:
    jti = str(uuid.uuid4())
    now = _now()
    expire = now + expires_delta
    payload = {
        "sub": subject,
        "exp": int(expire.timestamp()),
        "jti": jti,
        "type": token_type,
        "iat": int(now.timestamp()),
    }
    try:
        token = jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)
    except JOSEError as e:
        logger.exception("token_encode_failed", sub=subject, type=token_type, error=str(e))
        raise TokenGenerationError() from e
    logger.debug("create_token", sub=subject, jti=jti, type=token_type, exp=payload["exp"])
    return {"token": token, "jti": jti, "exp": payload["exp"]}

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> Dict[str, Any]:
    return _create_token(subject, ACCESS_TOKEN_TYPE, expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))

def create_reset_token(subject: str, expires_delta: Optional[timedelta] = None) -> Dict[str, Any]:
    return _create_token(subject, RESET_TOKEN_TYPE, expires_delta or timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES))

def decode_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> str:
    """
    Verify signature, expiry and token type; return the user id in ``sub``.
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError as e:
        logger.warning("token_header_malformed", error=str(e))
        raise InvalidTokenError() from e
    if header.get("alg") != ALGORITHM:
        logger.warning("token_unexpected_alg", alg=header.get("alg"))
        raise UnexpectedSigningMethodError()

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        logger.info("token_expired")
        raise TokenExpiredError() from e
    except JWTError as e:
        logger.warning("token_decode_failed", error=str(e))
        raise InvalidTokenError() from e

    if payload.get("type") != expected_type:
        logger.warning("token_type_mismatch", expected=expected_type, got=payload.get("type"))
        raise InvalidTokenError()

    sub = payload.get("sub")
    if not sub:
        raise TokenSubjectError()
    if not isinstance(sub, str):
        raise TokenSubjectError("'id' field value is not a string")
    return sub

# --- OTP ---
OTP_LENGTH = int(os.getenv("OTP_LENGTH", "6"))
OTP_TTL_SECONDS = int(os.getenv("OTP_TTL_SECONDS", "300"))

def generate_otp(length: int = OTP_LENGTH) -> str:
    range_start = 10 ** (length - 1)
    range_end = (10 ** length) - 1
    return str(secrets.randbelow(range_end - range_start + 1) + range_start)

def codes_match(stored: str, given: str) -> bool:
    return secrets.compare_digest(stored.encode(), given.encode())
