"""
Notification Dispatcher Base
============================

Abstract base class and result model for vendor notifications.

Version: 0.1.0
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from shared.models.assessment import Assessment, ValidationState
from shared.models.vendor import Vendor


class NotificationResult(BaseModel):
    """Outcome of a single delivery attempt."""

    success: bool
    message_id: str | None = None
    error: str | None = None
    test_mode: bool = False


class NotificationDispatcher(ABC):
    """
    Informs a vendor that its assessment changed validation state.

    Delivery is at-most-once: implementations report failure through the
    result instead of retrying.
    """

    @abstractmethod
    async def notify(
        self,
        vendor: Vendor,
        assessment: Assessment,
        kind: ValidationState,
        locale: str,
    ) -> NotificationResult:
        """Send one notification."""
        ...

    async def verify(self) -> bool:
        """Check the delivery channel is reachable."""
        return True
