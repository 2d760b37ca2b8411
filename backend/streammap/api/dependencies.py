"""API dependencies for authentication and services"""

from typing import Optional
from fastapi import Depends, HTTPException, status, Header
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from uuid import UUID

from streammap.api.errors import unauthorized_error
from streammap.database import get_db
from streammap.models import User
from streammap.services.auth_service import AuthService
from streammap.services.project_service import ProjectService
from streammap.services.search_service import ProjectSearchService


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=unauthorized_error(detail),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get current authenticated user from JWT token.

    Args:
        authorization: Authorization header with Bearer token
        db: Database session

    Returns:
        User object

    Raises:
        HTTPException: If token is invalid or user not found
    """
    if not authorization:
        raise _unauthorized("Authorization header missing")

    # Extract token from "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Invalid authorization header format")

    payload = AuthService.validate_token(parts[1], token_type="access")
    if not payload:
        raise _unauthorized("Invalid or expired token")

    user_id_str: Optional[str] = payload.get("sub")
    if not user_id_str:
        raise _unauthorized("Invalid token payload")

    try:
        user_id = UUID(user_id_str)
    except ValueError:
        raise _unauthorized("Invalid user ID in token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise _unauthorized("User not found")

    return user


def get_project_service(db: AsyncSession = Depends(get_db)) -> ProjectService:
    """Project lifecycle service bound to the request session"""
    return ProjectService(db)


def get_search_service(db: AsyncSession = Depends(get_db)) -> ProjectSearchService:
    """Project search service bound to the request session"""
    return ProjectSearchService(db)
