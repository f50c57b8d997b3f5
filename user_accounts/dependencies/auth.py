# user_accounts/dependencies/auth.py
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..UAA.utils import decode_token, ACCESS_TOKEN_TYPE, RESET_TOKEN_TYPE
from ..UAA.errors import InvalidTokenError

bearer_scheme = HTTPBearer()

def _subject(token: str, expected_type: str) -> str:
    try:
        return decode_token(token, expected_type=expected_type)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

async def get_current_user_id(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    return _subject(credentials.credentials, ACCESS_TOKEN_TYPE)

async def get_reset_user_id(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    return _subject(credentials.credentials, RESET_TOKEN_TYPE)
