from passlib.context import CryptContext
from passlib.exc import PasswordValueError
from passlib.hash import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Union
import jwt

from .config import Settings
from .exceptions import DigestFormatError, InvalidPayload, SigningError

DEFAULT_ROLE = "user"
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted bcrypt digests with a configurable cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        # Refuse to hash passwords bcrypt would silently truncate
        self._context = CryptContext(
            schemes=["bcrypt"], bcrypt__default_rounds=rounds, bcrypt__truncate_error=True
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(rounds=settings.BCRYPT_ROUNDS)

    def hash(self, password: str) -> str:
        """
        Raises:
            InvalidPayload: If bcrypt cannot hash the password (NUL bytes, or
                longer than 72 bytes once UTF-8 encoded)
        """
        try:
            return self._context.hash(password)
        except PasswordValueError as exc:
            raise InvalidPayload(context={"reason": str(exc)}) from exc

    def verify(self, digest: str, password: str) -> bool:
        """
        Check a candidate password against a stored digest.

        Returns False on mismatch, including candidates bcrypt cannot hash.
        Raises DigestFormatError when the digest is not a bcrypt hash at all.
        """
        self._parse(digest)
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False
        try:
            return self._context.verify(password, digest)
        except PasswordValueError:
            return False
        except (ValueError, TypeError) as exc:
            raise DigestFormatError(context={"reason": str(exc)}) from exc

    def needs_rehash(self, digest: str) -> bool:
        """True when the digest was produced with a lower cost than configured."""
        return self._parse(digest).rounds < self.rounds

    @staticmethod
    def _parse(digest: str):
        try:
            return bcrypt.from_string(digest)
        except (ValueError, TypeError) as exc:
            raise DigestFormatError(context={"reason": str(exc)}) from exc


class TokenIssuer:
    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_hours: int = 24,
        claims_namespace: str = "https://hasura.io/jwt/claims",
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_delta = timedelta(hours=expire_hours)
        self.claims_namespace = claims_namespace

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expire_hours=settings.JWT_EXPIRE_HOURS,
            claims_namespace=settings.JWT_CLAIMS_NAMESPACE,
        )

    def issue(self, user_id: Union[int, str], role: str = DEFAULT_ROLE) -> str:
        """
        Sign a session token for the given user.

        Args:
            user_id: Identifier assigned by the data service
            role: Role granted to the session

        Returns:
            Encoded JWT carrying the authorization claims and a 24h expiry

        Raises:
            SigningError: If no signing key is configured or encoding fails
        """
        if not self.secret:
            raise SigningError(context={"reason": "empty signing key"})

        issued_at = datetime.now(timezone.utc)
        payload = {
            self.claims_namespace: {
                "x-hasura-allowed-roles": [role],
                "x-hasura-default-role": role,
                "x-hasura-user-id": str(user_id),
            },
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        try:
            return jwt.encode(payload, self.secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as exc:
            raise SigningError(context={"reason": str(exc)}) from exc
