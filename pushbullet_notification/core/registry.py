# core/registry.py — Wires notification channels to the forum host
#
# The host registers itself once as the HostProvider; each channel module
# (pushbullet today) builds its channel from that host and registers it by
# channel name. The host then fans its save hooks out over channels().

import logging
from typing import Optional

from pushbullet_notification.core.interfaces.host import HostProvider
from pushbullet_notification.core.interfaces.notification import NotificationChannel

log = logging.getLogger("pushbullet.registry")


class ChannelRegistry:
    """
    One host, many channels.

    register_host() / register_channel() reject objects that do not implement
    the matching interface, so a misconfigured host fails at startup instead
    of on the first save.
    """

    def __init__(self):
        self._host: Optional[HostProvider] = None
        self._channels: dict[str, NotificationChannel] = {}
        self._waiting: list[str] = []  # module ids that asked for a host before one existed

    @property
    def host(self) -> Optional[HostProvider]:
        return self._host

    def register_host(self, host: HostProvider) -> None:
        if not isinstance(host, HostProvider):
            raise TypeError(f"{type(host).__name__} does not implement HostProvider")
        if self._host is not None and self._host is not host:
            log.warning(
                f"Host {type(self._host).__name__!r} replaced by {type(host).__name__!r}; "
                f"{len(self._channels)} registered channel(s) still point at the old one"
            )
        self._host = host

    def host_for(self, module_id: str) -> Optional[HostProvider]:
        """The registered host, or None (remembered for validate()) when there is none yet."""
        if self._host is None:
            log.warning(f"Module '{module_id}' needs a HostProvider but the host has not registered one")
            self._waiting.append(module_id)
        return self._host

    def register_channel(self, name: str, channel: NotificationChannel) -> None:
        if not isinstance(channel, NotificationChannel):
            raise TypeError(f"{type(channel).__name__} does not implement NotificationChannel")
        existing = self._channels.get(name)
        if existing is not None and existing is not channel:
            log.warning(f"Channel '{name}' re-registered; closing the previous instance")
            close = getattr(existing, "close", None)
            if close is not None:
                close()
        self._channels[name] = channel
        log.debug(f"Registered channel '{name}': {type(channel).__name__}")

    def channel(self, name: str) -> Optional[NotificationChannel]:
        return self._channels.get(name)

    def channels(self) -> list[NotificationChannel]:
        return list(self._channels.values())

    def validate(self) -> bool:
        """True when a host is registered and no module was left waiting for one. Never raises."""
        if self._host is None:
            log.error("No HostProvider registered; notification channels cannot be built")
            return False
        for module_id in self._waiting:
            log.error(f"Module '{module_id}' was loaded before the host and registered no channel")
        return not self._waiting

    def close(self) -> None:
        for channel in self._channels.values():
            close = getattr(channel, "close", None)
            if close is not None:
                close()
        self._channels.clear()
