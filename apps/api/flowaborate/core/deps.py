"""FastAPI dependencies for authentication and database access."""

from typing import Generator
from uuid import UUID

from fastapi import HTTPException, Request
from sqlalchemy.orm import Session

from flowaborate.core.security import decode_access_token
from flowaborate.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(request: Request) -> UUID:
    """
    Authenticated user id from the `Authorization: Bearer` access token.

    Raises:
        HTTPException 401: Authentication failed
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_access_token(token)
        return UUID(str(payload["sub"]))
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid session")
