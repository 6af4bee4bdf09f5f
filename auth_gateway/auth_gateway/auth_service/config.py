"""
Configuration management for the Auth Gateway
"""
from functools import lru_cache
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

from .exceptions import ConfigurationError

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Auth Gateway configuration loaded from environment variables"""

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # GraphQL Data Service
    DATA_SERVICE_URL: str = "http://localhost:8080/v1/graphql"
    DATA_SERVICE_ADMIN_SECRET: str = ""
    # Only disable for local development against self-signed certificates
    DATA_SERVICE_VERIFY_TLS: bool = True
    DATA_SERVICE_TIMEOUT_SECONDS: float = 10.0

    # Session Tokens
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = 24
    JWT_CLAIMS_NAMESPACE: str = "https://hasura.io/jwt/claims"

    # Password Hashing
    BCRYPT_ROUNDS: int = 12

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise to an upper-case level name logging understands"""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
        return level


    def check_secrets(self) -> None:
        """
        Fail fast when a required secret was not provided.

        Raises:
            ConfigurationError: If the admin secret or signing secret is empty
        """
        missing = [
            name for name in ("DATA_SERVICE_ADMIN_SECRET", "JWT_SECRET")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")


@lru_cache
def get_settings() -> Settings:
    return Settings()
