"""
Signup and login endpoints.
"""
import logging
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status

from ..auth import PasswordHasher, TokenIssuer
from ..data_service import DataServiceClient
from ..exceptions import (
    AuthServiceError,
    InvalidCredentials,
    TransportError,
    UserCreationFailed,
    UserFetchFailed,
    UserNotFound,
)
from ..schemas import ErrorResponse, LoginRequest, SignupRequest, Token, UserRecord
from ..users import create_user, find_user_by_email, update_password
from ..utils.event_logger import log_auth_event

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


def get_data_service(request: Request) -> DataServiceClient:
    return request.app.state.data_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def rehash_password_if_needed(
    data_service: DataServiceClient,
    hasher: PasswordHasher,
    user: UserRecord,
    password: str,
) -> None:
    """
    Upgrade a stored digest to the configured cost after a successful login.

    Runs detached from the login response. Failures are logged and dropped.
    """
    try:
        if not hasher.needs_rehash(user.password):
            return
        update_password(data_service, user.id, hasher.hash(password))
    except AuthServiceError as exc:
        logger.warning(
            "Password rehash failed: user_id=%s, error=%s, context=%s",
            user.id, type(exc).__name__, exc.context
        )
        return

    log_auth_event("password_rehash", user.email, user_id=user.id, metadata={"rounds": hasher.rounds})


@router.post(
    "/signup",
    response_model=UserRecord,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def signup(
    payload: SignupRequest,
    request: Request,
    data_service: DataServiceClient = Depends(get_data_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    hashed_pw = hasher.hash(payload.password)

    try:
        user = create_user(data_service, payload.username, payload.email, hashed_pw)
    except AuthServiceError as exc:
        log_auth_event(
            "signup_failure", payload.email, request,
            metadata={"reason": type(exc).__name__}
        )
        raise UserCreationFailed(context=exc.context) from exc

    log_auth_event("signup_success", user.email, request, user_id=user.id)
    return user


@router.post(
    "/login",
    response_model=Token,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def login(
    credentials: LoginRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    data_service: DataServiceClient = Depends(get_data_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
):
    try:
        user = find_user_by_email(data_service, credentials.email)
    except TransportError as exc:
        log_auth_event(
            "login_failure", credentials.email, request,
            metadata={"reason": "data_service_unavailable"}
        )
        raise UserFetchFailed(context=exc.context) from exc

    if user is None:
        log_auth_event("login_failure", credentials.email, request, metadata={"reason": "user_not_found"})
        raise UserNotFound(context={"email": credentials.email})

    if not hasher.verify(user.password, credentials.password):
        log_auth_event("login_failure", credentials.email, request, user_id=user.id)
        raise InvalidCredentials()

    token = token_issuer.issue(user.id)

    background_tasks.add_task(rehash_password_if_needed, data_service, hasher, user, credentials.password)

    log_auth_event("login_success", user.email, request, user_id=user.id)
    return Token(token=token)
