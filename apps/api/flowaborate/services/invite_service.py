"""Invite link lookup for collaborations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from flowaborate.core.config import settings
from flowaborate.core.security import generate_invite_token
from flowaborate.db.models import Collaboration


def build_invite_url(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/invite/{token}"


def get_collaboration_by_invite_token(db: Session, token: str) -> Collaboration | None:
    """Resolve an invite token to exactly one collaboration (or None)."""
    if not token:
        return None
    return db.execute(
        select(Collaboration).where(Collaboration.invite_token == token)
    ).scalar_one_or_none()


def new_invite_token(db: Session) -> str:
    """Generate a token not already used by another collaboration."""
    while True:
        token = generate_invite_token()
        if get_collaboration_by_invite_token(db, token) is None:
            return token
