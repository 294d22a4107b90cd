"""
Headline and link rendering for activity pushes.

Headline formats use the host's placeholder syntax:

    "{ActivityName} commented on {Data.Name}"
    "{ActivityUserID,user} mentioned you"

A placeholder is a field name, optionally a dotted path into nested
mappings, optionally followed by ",modifier" (ignored here; the host uses
it for HTML links that a push body cannot carry anyway).
"""

import html
import json
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pushbullet_notification.core.interfaces.host import ActivityEvent, HostProvider
from pushbullet_notification.modules.pushbullet.errors import FormatError

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")
_TAG = re.compile(r"</?[A-Za-z][^>]*>")
_WHITESPACE = re.compile(r"\s+")
_MISSING = object()


@dataclass(frozen=True)
class RenderedMessage:
    headline: str
    url: str


def decode_payload(data) -> Optional[dict]:
    """Return the structured payload, decoding a stored JSON blob if needed."""
    if data is None or isinstance(data, Mapping):
        return data
    if isinstance(data, (bytes, bytearray)):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError(f"Activity payload is not UTF-8: {e}") from e
    if not isinstance(data, str):
        raise FormatError(f"Unsupported activity payload type {type(data).__name__}")
    if not data.strip():
        return None
    try:
        decoded = json.loads(data)
    except json.JSONDecodeError as e:
        raise FormatError(f"Activity payload is not valid JSON: {e}") from e
    if not isinstance(decoded, dict):
        raise FormatError("Activity payload must decode to an object")
    return decoded


def _lookup(context: Mapping[str, Any], path: str):
    current: Any = context
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def format_string(template: str, context: Mapping[str, Any]) -> str:
    """Substitute {placeholders}. Unknown names stay verbatim, None becomes ''."""

    def _replace(match: re.Match) -> str:
        name = match.group(1).split(",", 1)[0].strip()
        value = _lookup(context, name) if name else _MISSING
        if value is _MISSING:
            return match.group(0)
        if value is None:
            return ""
        return str(value)

    return _PLACEHOLDER.sub(_replace, template or "")


def plain_text(value: str) -> str:
    """Strip markup so the headline reads cleanly in a notification tray."""
    text = _TAG.sub("", value)
    text = html.unescape(text)
    return _WHITESPACE.sub(" ", text).strip()


class MessageFormatter:
    def __init__(self, host: HostProvider):
        self._host = host

    def render(self, event: ActivityEvent) -> RenderedMessage:
        # Work on a copy; the event's stored fields stay as the host wrote them.
        context = dict(event.fields)
        payload = decode_payload(event.data)
        if payload is not None:
            context["Data"] = payload
        headline = plain_text(format_string(event.headline_format, context))
        return RenderedMessage(headline=headline, url=self._host.canonical_url(event.route))
