"""API routers."""

from flowaborate.routers.collaborations import router as collaborations_router
from flowaborate.routers.dashboard import router as dashboard_router
from flowaborate.routers.internal import router as internal_router
from flowaborate.routers.invites import router as invites_router
from flowaborate.routers.tasks import router as tasks_router

__all__ = [
    "collaborations_router",
    "dashboard_router",
    "internal_router",
    "invites_router",
    "tasks_router",
]
