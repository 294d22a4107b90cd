# core/interfaces/host.py
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pushbullet_notification.core.base import DeliveryStatus


@dataclass
class ActivityEvent:
    """
    A host activity record eligible for push delivery.

    The host owns it. The channel reads every field and writes only
    delivery_status.
    """
    notify_user_id: int
    activity_type: str              # e.g. "DiscussionComment"
    headline_format: str            # e.g. "{ActivityName} commented on {Discussion}"
    route: str                      # host-relative path, e.g. "/discussion/5"
    fields: dict[str, Any] = field(default_factory=dict)
    data: Union[dict, str, None] = None  # structured payload, may be a JSON blob
    activity_id: Optional[int] = None
    preference: Optional[str] = None     # preference suffix, defaults to activity_type
    delivery_status: Optional[DeliveryStatus] = None

    @property
    def preference_suffix(self) -> str:
        return self.preference or self.activity_type


@dataclass
class Recipient:
    user_id: int
    email: Optional[str]
    name: Optional[str] = None


class HostProvider(ABC):
    """What the push channel needs from the forum host."""

    @abstractmethod
    def lookup_user(self, user_id: int) -> Recipient:
        """Raises RecipientNotFound when the user does not exist."""
        ...

    @abstractmethod
    def preference_definitions(self) -> list[tuple[str, str, str]]:
        """Returns: [(group, name, description)] for the host's native channels."""
        ...

    @abstractmethod
    def user_opted_in(self, user_id: int, preference_key: str) -> bool: ...

    @abstractmethod
    def canonical_url(self, route: str) -> str: ...

    @abstractmethod
    def credential(self) -> Optional[str]: ...

    @abstractmethod
    def has_permission(self, user_id: int, permission: str) -> bool: ...
