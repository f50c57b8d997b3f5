# user_accounts/UAA/errors.py
from typing import Optional

from fastapi import status


class AccountError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "account error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


# --- kinds ---
class InvalidInputError(AccountError, ValueError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "invalid input"

class ConflictError(AccountError):
    status_code = status.HTTP_409_CONFLICT
    message = "conflict"

class NotFoundError(AccountError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "not found"

class AuthorizationError(AccountError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "not authorized"

class DependencyError(AccountError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "dependency failure"


# --- conflicts ---
class UserAlreadyRegisteredError(ConflictError):
    message = "there is already a registered user with this email"

class UsernameTakenError(ConflictError):
    message = "username already taken"

class SameEmailError(ConflictError):
    message = "the email cannot be the same as the previous one"


# --- not found ---
class UserNotFoundError(NotFoundError):
    message = "user not found"

class OTPNotFoundError(NotFoundError):
    message = "not found OTP from email"


# --- authorization ---
class PasswordMismatchError(AuthorizationError):
    message = "invalid password"

class InvalidOTPError(AuthorizationError):
    message = "wrong or expired OTP"

class UserIDMismatchError(AuthorizationError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "user ID mismatch"

class InvalidTokenError(AuthorizationError):
    message = "token invalid"

class TokenExpiredError(InvalidTokenError):
    message = "token expired"

class UnexpectedSigningMethodError(InvalidTokenError):
    message = "unexpected signature method"

class TokenSubjectError(InvalidTokenError):
    message = "error to get id in token"


# --- dependencies ---
class HashPasswordError(DependencyError):
    message = "error trying hashed password"

class TokenGenerationError(DependencyError):
    message = "error to generate new token jwt"

class SendConfirmationCodeError(DependencyError):
    status_code = status.HTTP_502_BAD_GATEWAY
    message = "error to send confirmation code"

class StoreError(DependencyError):
    message = "storage backend failure"
