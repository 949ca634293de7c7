# tests/test_transports.py

from __future__ import annotations

import json

import httpx
import pytest

from tasktime.cli.bootstrap import build_transports
from tasktime.notify.transports import DesktopTransport, EmailTransport, WebhookTransport


def test_webhook_posts_text_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    WebhookTransport("https://hooks.example.com/abc", client=client).send("Task ended", "Write report")

    assert len(seen) == 1
    assert json.loads(seen[0].content) == {"text": "Task ended: Write report"}


def test_webhook_error_status_raises() -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    with pytest.raises(httpx.HTTPStatusError):
        WebhookTransport("https://hooks.example.com/abc", client=client).send("t", "b")


def test_build_transports_follows_settings(settings) -> None:
    settings.notify_desktop = True
    settings.notify_email = True
    settings.email_recipient = "me@example.com"
    settings.notify_messaging = True
    settings.messaging_api_url = "https://hooks.example.com/abc"

    transports = build_transports(settings, {"notify-send": True, "mail": True})

    assert [type(t) for t in transports] == [DesktopTransport, EmailTransport, WebhookTransport]


def test_build_transports_skips_unavailable_or_unconfigured(settings) -> None:
    settings.notify_desktop = True
    settings.notify_email = True
    settings.email_recipient = ""
    settings.notify_messaging = True
    settings.messaging_api_url = ""

    assert build_transports(settings, {"notify-send": False, "mail": True}) == []
