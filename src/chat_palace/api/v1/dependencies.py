"""Shared API dependencies for caller identity and database access.

The caller identity is whatever the client puts in the identity header
(``_id`` by default). It is not signed or verified, so any client can act as
any user; a real deployment should replace it with signed session tokens.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from chat_palace.core.settings import settings
from chat_palace.db.session import get_db

# Header scheme carrying the caller's user id
identity_scheme = APIKeyHeader(
    name=settings.identity_header,
    auto_error=False,
    description="Identifier of the calling user (unverified)",
)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_caller_id(
    caller_id: Annotated[str | None, Depends(identity_scheme)],
) -> str:
    """Return the caller's asserted user id.

    Raises:
        HTTPException: 401 if the identity header is missing or blank
    """
    if caller_id is None or not caller_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unauthorized: {settings.identity_header} not provided",
        )
    return caller_id.strip()


# Type alias for caller identity dependency
CallerIdDep = Annotated[str, Depends(get_caller_id)]
