"""
User operations issued against the GraphQL data service.

Each operation is a fixed query/mutation template; request values only ever
travel in the ``variables`` object. Responses are decoded into typed envelopes
so a missing or malformed field is reported by name.
"""
import logging
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .data_service import DataServiceClient
from .exceptions import (
    AuthServiceError,
    InvalidUserData,
    PasswordUpdateFailed,
    UserCreationFailed,
)
from .schemas import (
    ErrorEnvelope,
    InsertUserEnvelope,
    UpdatePasswordEnvelope,
    UserRecord,
    UsersEnvelope,
)

logger = logging.getLogger(__name__)

FIND_USER_BY_EMAIL = """
query UserByEmail($email: String!) {
  users(where: {email: {_eq: $email}}, limit: 1) {
    id
    username
    email
    password
  }
}
"""

CREATE_USER = """
mutation CreateUser($username: String!, $email: String!, $password: String!) {
  insert_users_one(object: {username: $username, email: $email, password: $password}) {
    id
    username
    email
    password
  }
}
"""

UPDATE_PASSWORD = """
mutation UpdatePassword($id: Int!, $password: String!) {
  update_users_by_pk(pk_columns: {id: $id}, _set: {password: $password}) {
    password
  }
}
"""

EnvelopeT = TypeVar("EnvelopeT", bound=BaseModel)


def _invalid_fields(exc: ValidationError) -> List[str]:
    return [".".join(str(part) for part in err["loc"]) or "<body>" for err in exc.errors()]


def decode_envelope(
    raw: bytes,
    envelope: Type[EnvelopeT],
    error_cls: Type[AuthServiceError],
    operation: str,
) -> EnvelopeT:
    """
    Decode a GraphQL response body into ``envelope``.

    Raises:
        error_cls: If the body is not JSON, carries GraphQL errors, or misses a
            required field. The offending fields are kept in ``context``.
    """
    try:
        errors = ErrorEnvelope.model_validate_json(raw).errors
    except ValidationError as exc:
        fields = _invalid_fields(exc)
        logger.warning("%s: unreadable data service response (%s)", operation, ", ".join(fields))
        raise error_cls(context={"operation": operation, "fields": fields}) from exc

    if errors:
        messages = [error.message for error in errors]
        logger.warning("%s: data service returned errors: %s", operation, "; ".join(messages))
        raise error_cls(context={"operation": operation, "graphql_errors": messages})

    try:
        return envelope.model_validate_json(raw)
    except ValidationError as exc:
        fields = _invalid_fields(exc)
        logger.warning("%s: malformed data service response, invalid fields: %s", operation, ", ".join(fields))
        raise error_cls(context={"operation": operation, "fields": fields}) from exc


def find_user_by_email(client: DataServiceClient, email: str) -> Optional[UserRecord]:
    """Return the user registered under ``email``, or None if there is none."""
    raw = client.execute(FIND_USER_BY_EMAIL, {"email": email})
    envelope = decode_envelope(raw, UsersEnvelope, InvalidUserData, "UserByEmail")
    if not envelope.data.users:
        return None
    return envelope.data.users[0]


def create_user(client: DataServiceClient, username: str, email: str, password: str) -> UserRecord:
    """Insert a user. ``password`` must already be a digest."""
    raw = client.execute(CREATE_USER, {"username": username, "email": email, "password": password})
    envelope = decode_envelope(raw, InsertUserEnvelope, UserCreationFailed, "CreateUser")
    return envelope.data.insert_users_one


def update_password(client: DataServiceClient, user_id: int, password: str) -> None:
    raw = client.execute(UPDATE_PASSWORD, {"id": user_id, "password": password})
    decode_envelope(raw, UpdatePasswordEnvelope, PasswordUpdateFailed, "UpdatePassword")
