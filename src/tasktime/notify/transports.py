# src/tasktime/notify/transports.py

from __future__ import annotations

import logging
import subprocess

import httpx

logger = logging.getLogger(__name__)


class DesktopTransport:
    """Desktop popup via `notify-send`."""

    name = "desktop"

    def __init__(self, binary: str = "notify-send") -> None:
        self._binary = binary

    def send(self, title: str, body: str) -> None:
        subprocess.run([self._binary, title, body], check=True, timeout=10)


class EmailTransport:
    """Mail via the local `mail` command (body on stdin)."""

    name = "email"

    def __init__(self, recipient: str, binary: str = "mail") -> None:
        if not recipient:
            raise ValueError("email recipient is required")
        self.recipient = recipient
        self._binary = binary

    def send(self, title: str, body: str) -> None:
        subprocess.run(
            [self._binary, "-s", title, self.recipient],
            input=body,
            text=True,
            check=True,
            timeout=30,
        )


class WebhookTransport:
    """Slack-style incoming webhook: POST {"text": "<title>: <body>"}."""

    name = "messaging"

    def __init__(self, url: str, *, client: httpx.Client | None = None, timeout: float = 10.0) -> None:
        if not url:
            raise ValueError("messaging webhook URL is required")
        self.url = url
        self._client = client
        self._timeout = timeout

    def send(self, title: str, body: str) -> None:
        payload = {"text": f"{title}: {body}"}
        if self._client is not None:
            resp = self._client.post(self.url, json=payload, timeout=self._timeout)
        else:
            resp = httpx.post(self.url, json=payload, timeout=self._timeout)
        resp.raise_for_status()
