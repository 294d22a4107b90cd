"""
Per-user opt-in for the Pushbullet channel.

Preferences are keyed "<channel>.<suffix>", e.g. "Pushbullet.DiscussionComment".
The host only knows its native channels ("Email.DiscussionComment",
"Popup.DiscussionComment"); synthesize_preferences() mirrors every one of
them into a sibling entry for this channel so the user can toggle it on the
same screen.
"""

from typing import Iterable

from pushbullet_notification.core.interfaces.host import HostProvider
from pushbullet_notification.modules.pushbullet.schemas import PreferenceDefinition

ALLOW_PERMISSION = "Plugins.PushbulletNotification.Allow"


def preference_key(channel: str, suffix: str) -> str:
    return f"{channel}.{suffix}"


def synthesize_preferences(definitions: dict, channel: str) -> dict:
    """
    Add "<channel>.<suffix>" next to every "<prefix>.<suffix>" entry.

    definitions is {group: {name: description}}. Each group's own dict is
    extended in place and the same mapping is returned. Names without a
    dot, and entries that already belong to the channel, are skipped.
    """
    for group, preferences in definitions.items():
        for name, description in list(preferences.items()):
            row = PreferenceDefinition(group=group, name=name, description=str(description))
            suffix = row.suffix
            if suffix is None or name.startswith(f"{channel}."):
                continue
            preferences[preference_key(channel, suffix)] = description
    return definitions


def group_definitions(rows: Iterable[tuple[str, str, str]]) -> dict:
    """Turn the host's [(group, name, description)] rows into {group: {name: description}}."""
    grouped: dict[str, dict[str, str]] = {}
    for group, name, description in rows:
        grouped.setdefault(group, {})[name] = description
    return grouped


class PreferenceFilter:
    """Answers "does this user want pushes for this kind of activity?"."""

    def __init__(self, host: HostProvider, channel: str):
        self._host = host
        self.channel = channel

    def key_for(self, suffix: str) -> str:
        return preference_key(self.channel, suffix)

    def is_opted_in(self, user_id: int, event_type: str) -> bool:
        return bool(self._host.user_opted_in(user_id, self.key_for(event_type)))

    def can_configure(self, user_id: int) -> bool:
        return bool(self._host.has_permission(user_id, ALLOW_PERMISSION))
