"""
Request dependencies: authentication and service wiring.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from trackmyjob.database import get_db
from trackmyjob.exceptions import AuthServiceError, InvalidTokenError
from trackmyjob.services.auth import AuthClient, AuthenticatedUser, extract_bearer_token
from trackmyjob.services.files import FileService
from trackmyjob.services.storage import LocalStorage, get_storage

logger = logging.getLogger(__name__)


def get_auth_client() -> AuthClient:
    return AuthClient()


async def get_file_service(
    db: AsyncSession = Depends(get_db),
    storage: LocalStorage = Depends(get_storage),
) -> AsyncGenerator[FileService, None]:
    """
    File service bound to the request's session.

    Commits the session before touching storage, so removed objects are
    only unlinked once their rows are gone for good, and objects written by
    a failed request are discarded.
    """
    file_service = FileService(storage)
    try:
        yield file_service
        await db.commit()
    except Exception:
        file_service.discard_written()
        raise
    file_service.purge_removed()


async def get_current_user(
    request: Request,
    auth_client: AuthClient = Depends(get_auth_client),
) -> AuthenticatedUser:
    """
    Verify the bearer token and attach the user to ``request.state.user``.

    Invalid or missing tokens give 401; a failing auth service gives a
    generic 500.
    """
    try:
        token = extract_bearer_token(request.headers.get("Authorization"))
        user = await auth_client.get_user(token)
    except InvalidTokenError as e:
        logger.warning(f"Rejected request to {request.url.path}: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except AuthServiceError as e:
        logger.error(f"Could not verify token for {request.url.path}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication service error",
        )

    request.state.user = user
    return user
