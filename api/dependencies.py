"""
API dependencies for dependency injection
"""

from typing import Generator, Optional
from uuid import UUID

from fastapi import Header
from sqlalchemy.orm import Session

from app.exceptions import ServiceValidationError, UnauthorizedError
from domain.models import get_db_session


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-ID"),
) -> UUID:
    """
    Identify the caller from the X-User-ID header.

    Raises:
        UnauthorizedError: Header missing
        ServiceValidationError: Header is not a UUID
    """
    if not x_user_id:
        raise UnauthorizedError("Missing X-User-ID header")
    try:
        return UUID(x_user_id.strip())
    except ValueError:
        raise ServiceValidationError("X-User-ID must be a UUID")
