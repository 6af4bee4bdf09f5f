"""
Error taxonomy for the auth gateway.

Every error raised across the signup/login flow carries the HTTP status and the
public message it is rendered with, so the flow boundary only has to translate
an ``AuthServiceError`` into a ``{"message": ...}`` body.
"""
from typing import Any, Dict, Optional


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing."""


class AuthServiceError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        if message is not None:
            self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, str]:
        return {"message": self.message}


class InvalidPayload(AuthServiceError):
    status_code = 400
    message = "Invalid request payload"


class TransportError(AuthServiceError):
    message = "Data service unavailable"


class UserCreationFailed(AuthServiceError):
    message = "Failed to create user"


class UserFetchFailed(AuthServiceError):
    message = "Failed to fetch user"


class InvalidUserData(AuthServiceError):
    message = "Invalid user data"


class PasswordUpdateFailed(AuthServiceError):
    message = "Failed to update password"


class UserNotFound(AuthServiceError):
    # Same public message as InvalidCredentials to avoid account enumeration
    status_code = 401
    message = "Invalid credentials"


class InvalidCredentials(AuthServiceError):
    status_code = 401
    message = "Invalid credentials"


class SigningError(AuthServiceError):
    message = "Failed to generate token"


class DigestFormatError(AuthServiceError):
    message = "Invalid stored password"
