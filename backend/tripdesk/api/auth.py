"""Stub auth dependency.

Extracts the session identity from a bearer token or uses a test default.
Real token validation is out of scope for this service.
"""

import uuid
from typing import Annotated

from fastapi import Header, HTTPException, status

from backend.tripdesk.db.context import RequestContext
from backend.tripdesk.models.common import Role

DEFAULT_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")


async def get_current_context(
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from authorization header.

    Accepts ``Bearer <user_id>`` for an agent and ``Bearer <user_id>:admin``
    for an administrator. Without a header the default test agent is used.

    Args:
        authorization: Authorization header (e.g., "Bearer <token>")

    Returns:
        RequestContext with user_id and role

    Raises:
        HTTPException: If authorization is invalid
    """
    if not authorization:
        return RequestContext(user_id=DEFAULT_USER_ID)

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:]  # Strip "Bearer "
    user_part, _, role_part = token.partition(":")

    try:
        user_id = uuid.UUID(user_part)
        role = Role(role_part) if role_part else Role.agent
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token format (expected user_id or user_id:role)",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return RequestContext(user_id=user_id, role=role)
