"""
Request dependencies: catalog context lookup and bearer token resolution.
"""

from typing import Optional

import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catalog.context import CatalogContext

logger = structlog.get_logger(__name__)

# auto_error is off so a missing header yields our 401 instead of a 403
security = HTTPBearer(auto_error=False)


def get_context(request: Request) -> CatalogContext:
    """Return the catalog context owned by the running application."""
    return request.app.state.context


async def current_username(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    context: CatalogContext = Depends(get_context)
) -> str:
    """
    Resolve the caller's bearer token to a username.

    Raises:
        HTTPException: 401 if no token is presented, or it is unknown or expired
    """
    token = credentials.credentials if credentials else None
    resolved = context.sessions.resolve(token)

    if not resolved.ok:
        logger.warning("Unauthenticated request", reason=resolved.error.message)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=resolved.error.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return resolved.value
