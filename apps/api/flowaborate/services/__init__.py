"""Service layer modules."""

# Import service modules (not individual functions) for cleaner access
from flowaborate.services import collaboration_service
from flowaborate.services import collaboration_status_service
from flowaborate.services import dashboard_service
from flowaborate.services import exception_sweep_service
from flowaborate.services import notification_service
from flowaborate.services import scheduling_service
from flowaborate.services import task_service

__all__ = [
    "collaboration_service",
    "collaboration_status_service",
    "dashboard_service",
    "exception_sweep_service",
    "notification_service",
    "scheduling_service",
    "task_service",
]
