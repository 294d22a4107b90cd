"""
Failure taxonomy for push delivery.

Raised where the channel talks to the host or the provider, and
absorbed by the dispatch pipeline into a DeliveryStatus. None of these
ever reach the host's save transaction.
"""

from typing import Optional

from pushbullet_notification.core.base import DeliveryStatus


def _with_detail(message: str, detail: Optional[str]) -> str:
    return f"{message}: {detail}" if detail else message


class PushbulletError(Exception):
    """Base class. `status` is what the pipeline records for the activity."""
    status: Optional[DeliveryStatus] = DeliveryStatus.FATAL


class NotConfigured(PushbulletError):
    """No access token provisioned. Soft: nothing is queued, status untouched."""
    status = None


class RecipientNotFound(PushbulletError):
    def __init__(self, user_id):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class FormatError(PushbulletError):
    """Stored activity payload could not be decoded."""


class TransportError(PushbulletError):
    """Provider unreachable. `retryable` is decided by the client's policy."""

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable

    @property
    def status(self) -> DeliveryStatus:
        return DeliveryStatus.RETRYABLE_ERROR if self.retryable else DeliveryStatus.FATAL


class ProviderRejected(PushbulletError):
    """Provider answered with a non-200, non-5xx status (bad request, auth)."""

    def __init__(self, status_code: int, detail: Optional[str] = None):
        super().__init__(_with_detail(f"Pushbullet rejected the push with status {status_code}", detail))
        self.status_code = status_code
        self.detail = detail


class ProviderUnavailable(PushbulletError):
    status = DeliveryStatus.RETRYABLE_ERROR

    def __init__(self, status_code: int, detail: Optional[str] = None):
        super().__init__(_with_detail(f"Pushbullet unavailable, status {status_code}", detail))
        self.status_code = status_code
        self.detail = detail
