from pydantic import BaseModel, Field

from typing import Any, Dict, List, Optional


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    username: Optional[str] = None
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    token: str


class ErrorResponse(BaseModel):
    message: str


# User records as returned by the data service

class UserRecord(BaseModel):
    id: int
    username: Optional[str] = None
    email: str
    password: str


# GraphQL response envelopes

class GraphQLError(BaseModel):
    message: str
    extensions: Optional[Dict[str, Any]] = None


class UsersData(BaseModel):
    users: List[UserRecord]


class UsersEnvelope(BaseModel):
    data: UsersData


class InsertUserData(BaseModel):
    insert_users_one: UserRecord


class InsertUserEnvelope(BaseModel):
    data: InsertUserData


class UpdatedPassword(BaseModel):
    password: str


class UpdatePasswordData(BaseModel):
    update_users_by_pk: UpdatedPassword


class UpdatePasswordEnvelope(BaseModel):
    data: UpdatePasswordData


class ErrorEnvelope(BaseModel):
    # Absent or null when the operation succeeded
    errors: Optional[List[GraphQLError]] = None
