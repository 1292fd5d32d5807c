"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database (schema created per test)
- Factories for profiles, workspaces, guest profiles and collaborations
- Bearer token helpers for authenticated requests
- HTTPX AsyncClient with the DB and email sender overridden
"""
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AsyncGenerator, Generator

# Must be set before flowaborate modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["JWT_SECRET_PREVIOUS"] = ""
os.environ["JWT_AUDIENCE"] = ""
os.environ["RESEND_API_KEY"] = ""
os.environ["INTERNAL_SECRET"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from flowaborate.core.deps import get_db
from flowaborate.core.security import create_access_token
from flowaborate.db.base import Base
from flowaborate.db.enums import CollaborationStatus
from flowaborate.db.models import Collaboration, GuestProfile, Profile, Workspace
from flowaborate.db.session import SessionLocal, engine
from flowaborate.main import app
from flowaborate.routers.collaborations_shared import get_notification_sender
from flowaborate.services.email_sender import DryRunEmailSender


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test on the shared in-memory connection.

    App code commits freely; dropping the tables afterwards isolates tests.
    """
    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


# =============================================================================
# Factories
# =============================================================================

@dataclass
class Participants:
    """Host, guest and editor accounts around one collaboration."""
    host: Profile
    guest: Profile
    editor: Profile
    workspace: Workspace
    guest_profile: GuestProfile


class Factory:
    def __init__(self, db: Session):
        self.db = db

    def profile(self, *, email: str | None = None, full_name: str | None = None) -> Profile:
        suffix = uuid.uuid4().hex[:8]
        profile = Profile(
            id=uuid.uuid4(),
            email=email or f"user-{suffix}@example.com",
            full_name=full_name or f"User {suffix}",
        )
        self.db.add(profile)
        self.db.flush()
        return profile

    def workspace(self, owner: Profile, **fields) -> Workspace:
        workspace = Workspace(name=fields.pop("name", "Test Show"), owner_id=owner.id, **fields)
        self.db.add(workspace)
        self.db.flush()
        return workspace

    def guest_profile(self, user: Profile | None = None, **fields) -> GuestProfile:
        guest = GuestProfile(
            user_id=user.id if user else None,
            name=fields.pop("name", "Grace Guest"),
            email=fields.pop("email", user.email if user else None),
            **fields,
        )
        self.db.add(guest)
        self.db.flush()
        return guest

    def participants(self, *, guest_bio: str | None = "Podcaster and author") -> Participants:
        host = self.profile(email="host@example.com", full_name="Hank Host")
        guest = self.profile(email="guest@example.com", full_name="Grace Guest")
        editor = self.profile(email="editor@example.com", full_name="Eddie Editor")
        workspace = self.workspace(host)
        guest_profile = self.guest_profile(guest, bio=guest_bio)
        return Participants(host, guest, editor, workspace, guest_profile)

    def collaboration(
        self,
        people: Participants,
        status: CollaborationStatus | str = CollaborationStatus.INVITED,
        *,
        with_editor: bool = True,
        with_guest: bool = True,
        **fields,
    ) -> Collaboration:
        now = datetime.now(timezone.utc)
        collaboration = Collaboration(
            workspace_id=people.workspace.id,
            host_id=people.host.id,
            editor_id=people.editor.id if with_editor else None,
            guest_profile_id=people.guest_profile.id if with_guest else None,
            status=CollaborationStatus(status).value,
            invite_token=fields.pop("invite_token", uuid.uuid4().hex),
            created_at=fields.pop("created_at", now),
            updated_at=fields.pop("updated_at", now),
            **fields,
        )
        self.db.add(collaboration)
        self.db.commit()
        self.db.refresh(collaboration)
        return collaboration


@pytest.fixture(scope="function")
def factory(db: Session) -> Factory:
    return Factory(db)


@pytest.fixture(scope="function")
def people(factory: Factory) -> Participants:
    return factory.participants()


# =============================================================================
# Auth Fixtures
# =============================================================================

def auth_headers(profile: Profile) -> dict[str, str]:
    """Authorization header for the given profile."""
    return {"Authorization": f"Bearer {create_access_token(profile.id)}"}


@pytest.fixture
def bearer():
    return auth_headers


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def outbox() -> DryRunEmailSender:
    """Captures emails the routers would have sent."""
    return DryRunEmailSender()


@pytest.fixture(scope="function")
async def client(db: Session, outbox: DryRunEmailSender) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient bound to the test DB; send with bearer(...) headers to authenticate."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_sender] = lambda: outbox

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
