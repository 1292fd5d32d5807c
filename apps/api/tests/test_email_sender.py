import httpx
import pytest

from flowaborate.core.config import settings
from flowaborate.core.errors import NotificationDispatchError
from flowaborate.services import email_sender
from flowaborate.services.email_sender import DryRunEmailSender, ResendEmailSender


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_resend_sender_posts_message():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = request.read()
        return httpx.Response(200, json={"id": "email_123"})

    async with _client(handler) as client:
        sender = ResendEmailSender("re_test", from_email="Show <show@example.com>", client=client)
        await sender.send(to_email="guest@example.com", subject="Hi", html="<p>Hi</p>")

    assert captured["auth"] == "Bearer re_test"
    assert b'"to":["guest@example.com"]' in captured["body"].replace(b" ", b"")


@pytest.mark.asyncio
async def test_resend_sender_raises_on_http_error():
    async with _client(lambda request: httpx.Response(422, json={"message": "bad"})) as client:
        sender = ResendEmailSender("re_test", client=client)
        with pytest.raises(NotificationDispatchError, match="HTTP 422") as exc_info:
            await sender.send(to_email="guest@example.com", subject="Hi", html="")

    assert exc_info.value.to_email == "guest@example.com"


@pytest.mark.asyncio
async def test_resend_sender_raises_on_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with _client(handler) as client:
        sender = ResendEmailSender("re_test", timeout_seconds=0.1, client=client)
        with pytest.raises(NotificationDispatchError, match="timeout"):
            await sender.send(to_email="guest@example.com", subject="Hi", html="")


@pytest.mark.asyncio
async def test_dry_run_sender_records_messages():
    sender = DryRunEmailSender()
    await sender.send(to_email="guest@example.com", subject="Hi", html="<p>Hi</p>")

    assert sender.key == "dry_run"
    assert [m.subject for m in sender.sent] == ["Hi"]


def test_get_email_sender_prefers_resend_when_configured(monkeypatch):
    monkeypatch.setattr(settings, "RESEND_API_KEY", "")
    assert email_sender.get_email_sender().key == "dry_run"

    monkeypatch.setattr(settings, "RESEND_API_KEY", "re_live")
    assert email_sender.get_email_sender().key == "resend"
