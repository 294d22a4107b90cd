# core/interfaces/notification.py
from abc import ABC, abstractmethod
from typing import Optional

from pushbullet_notification.core.base import DeliveryStatus
from pushbullet_notification.core.interfaces.host import ActivityEvent


class NotificationChannel(ABC):
    """What the host calls, synchronously, to deliver activities over a channel."""

    @abstractmethod
    def on_event_created(self, event: ActivityEvent, batch) -> bool:
        """Queue event into the save transaction's batch. Returns False when skipped."""
        ...

    @abstractmethod
    def on_event_persisting(self, event: ActivityEvent) -> Optional[DeliveryStatus]:
        """Attempt delivery and set event.delivery_status before the host commits."""
        ...

    @abstractmethod
    def on_preferences_defined(self, definitions: dict, viewer_user_id: int) -> dict:
        """Add this channel's column to the notification preference definitions."""
        ...
