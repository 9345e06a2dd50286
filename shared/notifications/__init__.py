"""
Notifications Module
====================

Vendor notification dispatch.

Usage:
    from shared.notifications import EmailNotificationDispatcher

    notifier = EmailNotificationDispatcher(settings.smtp, settings.base_url)
    result = await notifier.notify(vendor, assessment, ValidationState.APPROVED, "en")
"""

from shared.notifications.dispatcher import NotificationDispatcher, NotificationResult
from shared.notifications.email import EmailNotificationDispatcher, build_message


__all__ = [
    "NotificationDispatcher",
    "NotificationResult",
    "EmailNotificationDispatcher",
    "build_message",
]
