"""
Configuration gate: is outbound delivery enabled at all?
"""

from typing import Optional

from pushbullet_notification.core.interfaces.host import HostProvider
from pushbullet_notification.modules.pushbullet.errors import NotConfigured


class ConfigurationGate:
    def __init__(self, host: HostProvider):
        self._host = host

    def credential(self) -> Optional[str]:
        """The provisioned access token, stripped, or None when absent/blank."""
        token = self._host.credential()
        if not isinstance(token, str):
            return None
        token = token.strip()
        return token or None

    def is_configured(self) -> bool:
        return self.credential() is not None

    def require_credential(self) -> str:
        token = self.credential()
        if token is None:
            raise NotConfigured("Pushbullet access token is not configured")
        return token
