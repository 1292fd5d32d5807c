"""
Internal endpoints for scheduled/cron operations.

Protected by X-Internal-Secret header.
Call from external cron (hourly) - the sweep windows assume that cadence.
"""
import logging

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel

from flowaborate.core.config import settings
from flowaborate.core.security import verify_secret
from flowaborate.db.session import SessionLocal
from flowaborate.services import exception_sweep_service
from flowaborate.services.email_sender import EmailSender

from .collaborations_shared import get_notification_sender

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal/scheduled", tags=["internal"])


def verify_internal_secret(x_internal_secret: str | None = Header(None)):
    """Verify the internal secret header."""
    if not settings.INTERNAL_SECRET:
        raise HTTPException(status_code=501, detail="INTERNAL_SECRET not configured")
    if not verify_secret(x_internal_secret, settings.INTERNAL_SECRET):
        raise HTTPException(status_code=403, detail="Invalid internal secret")


class KindCountsResponse(BaseModel):
    sent: int
    skipped: int
    failed: int


class ExceptionSweepResponse(BaseModel):
    collaborations_with_items: int
    sent: int
    skipped: int
    failed: int
    by_kind: dict[str, KindCountsResponse]
    errors: list[str]


@router.post(
    "/exception-sweep",
    response_model=ExceptionSweepResponse,
    dependencies=[Depends(verify_internal_secret)],
)
async def run_exception_sweep(
    sender: EmailSender = Depends(get_notification_sender),
):
    """
    Hourly sweep over scheduled collaborations and stale workflows.

    Sends:
    - 24h and 1h recording reminders to the guest
    - no_show / stalled / missed_deadline alerts to the host
    """
    try:
        with SessionLocal() as db:
            summary = await exception_sweep_service.run_exception_sweep(db, sender)
    except exception_sweep_service.SweepAlreadyRunning:
        logger.warning("Exception sweep requested while another run is in progress")
        raise HTTPException(status_code=409, detail="Exception sweep already running")
    return summary.to_dict()
