"""
Event logger utility for authentication events.
"""
from typing import Any, Dict, Optional
from fastapi import Request
import logging

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "signup_success",
    "signup_failure",
    "login_success",
    "login_failure",
    "password_rehash",
}


def client_ip(request: Optional[Request]) -> Optional[str]:
    """Extract the caller's IP address with X-Forwarded-For fallback."""
    if request is None:
        return None

    ip_address = None
    if request.client:
        ip_address = request.client.host

    # X-Forwarded-For can contain multiple IPs, take the first one
    if not ip_address and request.headers.get("x-forwarded-for"):
        ip_address = request.headers.get("x-forwarded-for").split(",")[0].strip()

    return ip_address


def log_auth_event(
    event_type: str,
    email: str,
    request: Optional[Request] = None,
    user_id: Optional[int] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> None:
    """
    Write one audit line for an authentication outcome.

    Args:
        event_type: One of: signup_success, signup_failure, login_success,
                    login_failure, password_rehash
        email: Login key the event concerns
        request: Incoming request, used for the client address
        user_id: Data service id when known
        metadata: Optional dictionary of additional context

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    level = logging.WARNING if event_type.endswith("_failure") else logging.INFO
    logger.log(
        level,
        "AUTH %s user_id=%s email=%s ip=%s metadata=%s",
        event_type, user_id, email, client_ip(request), metadata or {}
    )
