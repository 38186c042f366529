# src/notify/notifier_factory.py — v1
"""Factory for the notifiers enabled by settings."""

from __future__ import annotations

from treesum.config.settings import Settings
from treesum.notify.base_notifier import BaseNotifier


def create_notifiers(settings: Settings) -> list[BaseNotifier]:
    """Instantiate every configured notifier.

    Returns:
        Change log notifier when ``logfile`` is set, Slack notifier when
        ``slack_chat_id`` is set. Possibly empty.
    """
    notifiers: list[BaseNotifier] = []

    if settings.logfile is not None:
        from treesum.notify.log_notifier import LogFileNotifier
        notifiers.append(LogFileNotifier(settings.logfile))

    if settings.slack_chat_id:
        from treesum.notify.slack_notifier import SlackNotifier
        notifiers.append(
            SlackNotifier(
                token=settings.slack_token,
                channel=settings.slack_chat_id,
                title=settings.notify_title,
                api_url=settings.slack_api_url,
                timeout=settings.slack_timeout,
            )
        )

    return notifiers
