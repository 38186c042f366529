# src/notify/slack_notifier.py — v1
"""Slack notifier via the chat.postMessage Web API.

Uses plain urllib; the payload is a single JSON POST with a bearer token.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request

from treesum.notify.base_notifier import BaseNotifier, NotificationError
from treesum.notify.message import format_message
from treesum.scan.models import ChangeReport

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://slack.com/api/chat.postMessage"


class SlackNotifier(BaseNotifier):
    """Post change reports to a Slack channel."""

    def __init__(
        self,
        token: str,
        channel: str,
        title: str = "Integrity scan found modified/new files.",
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
    ) -> None:
        if not token or not channel:
            raise ValueError("Slack notifier needs both a token and a channel")
        self._token = token
        self._channel = channel
        self._title = title
        self._api_url = api_url
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "slack"

    def build_request(self, report: ChangeReport) -> urllib.request.Request:
        """Build the chat.postMessage request for ``report``."""
        payload = json.dumps(
            {"channel": self._channel, "text": format_message(report, self._title)}
        ).encode("utf-8")
        return urllib.request.Request(
            self._api_url,
            data=payload,
            headers={
                "Content-Type": "application/json; charset=utf-8",
                "Authorization": f"Bearer {self._token}",
            },
            method="POST",
        )

    def notify(self, report: ChangeReport) -> None:
        req = self.build_request(report)
        logger.info("Sending Slack message to %s", self._channel)
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                data = json.loads(resp.read().decode("utf-8") or "{}")
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise NotificationError(f"Slack request failed: {exc}") from exc

        # The Web API answers 200 with ok=false on logical errors.
        if not data.get("ok", False):
            raise NotificationError(f"Slack API error: {data.get('error', 'unknown')}")
