"""
Core FastAPI dependencies: settings and caller authentication.
"""

from typing import Annotated, Optional

import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings, get_settings
from app.domain.value_objects import CallerIdentity
from app.utils.security import TokenManager

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)


def get_settings_dependency() -> Settings:
    """Get application settings"""
    return get_settings()


def get_token_manager() -> TokenManager:
    return TokenManager()


# Authentication dependencies
async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_manager: TokenManager = Depends(get_token_manager),
) -> Optional[CallerIdentity]:
    """Get caller from token (optional); invalid tokens read as anonymous"""
    if not credentials:
        return None

    caller = token_manager.authenticate(credentials.credentials)
    if caller is None:
        logger.warning("Failed to verify token, continuing anonymously")
    return caller


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_manager: TokenManager = Depends(get_token_manager),
) -> CallerIdentity:
    """Get current authenticated caller"""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    caller = token_manager.authenticate(credentials.credentials)
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller


OptionalCallerDep = Annotated[Optional[CallerIdentity], Depends(get_current_user_optional)]
CallerDep = Annotated[CallerIdentity, Depends(get_current_user)]


__all__ = [
    "get_settings_dependency",
    "get_token_manager",
    "get_current_user_optional",
    "get_current_user",
    "OptionalCallerDep",
    "CallerDep",
]
