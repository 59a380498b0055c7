"""
Authentication Dependencies
FastAPI dependencies for protecting routes and getting current user
"""

from datetime import datetime
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from flexispace.config import settings
from flexispace.database import get_db
from flexispace.models.user import User, UserType
from flexispace.utils.auth import decode_access_token

# Security scheme
security = HTTPBearer(auto_error=False)


def _token_from_request(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header first, then the cookie set at login for the HTML pages"""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.ACCESS_TOKEN_COOKIE)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Get the current authenticated user from JWT token

    Args:
        request: Incoming request (for the cookie fallback)
        credentials: Bearer token from request header
        db: Database session

    Returns:
        User: Current authenticated user

    Raises:
        HTTPException: If authentication fails
    """
    token = _token_from_request(request, credentials)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decode_access_token(token)

    # Get user from database
    user = db.query(User).filter(User.id == user_id).first()

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account",
        )

    # Check if account is locked
    if user.locked_until and user.locked_until > datetime.utcnow():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is temporarily locked due to multiple failed login attempts",
        )

    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Ensure user is active"""
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")
    return current_user


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Same as get_current_user, but anonymous or invalid credentials give None.
    Used by public endpoints and the HTML pages.
    """
    try:
        return await get_current_user(request=request, credentials=credentials, db=db)
    except HTTPException:
        return None


def require_role(*allowed_types: UserType):
    """
    Dependency factory to check if user has required type

    Usage:
        @router.get("/admin/stats")
        def stats(current_user: User = Depends(require_role(UserType.ADMIN))):
            ...
    """

    async def role_checker(
        current_user: User = Depends(get_current_active_user),
    ) -> User:
        if current_user.user_type not in allowed_types:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user

    return role_checker


async def get_admin(
    current_user: User = Depends(require_role(UserType.ADMIN)),
) -> User:
    """Get current user and ensure they are an admin"""
    return current_user
