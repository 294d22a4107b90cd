"""
Pushbullet notification channel for forum hosts.

The host calls the channel at three points:

    channel.on_preferences_defined(definitions, viewer_user_id)
    channel.on_event_created(event, batch)
    channel.on_event_persisting(event)   # or channel.dispatch_batch(batch)

and writes event.delivery_status back onto its activity record before
committing. Hosts on SQLAlchemy can run structure(engine) once and let
notify_activities() do the write-back.
"""

from pushbullet_notification.core.base import DeliveryStatus
from pushbullet_notification.core.interfaces.host import ActivityEvent, HostProvider, Recipient
from pushbullet_notification.core.registry import ChannelRegistry
from pushbullet_notification.modules.pushbullet.activities import notify_activities
from pushbullet_notification.modules.pushbullet.models import structure
from pushbullet_notification.modules.pushbullet.pipeline import DispatchBatch, PushbulletChannel

__version__ = "0.2.0"

__all__ = [
    "ActivityEvent",
    "ChannelRegistry",
    "DeliveryStatus",
    "DispatchBatch",
    "HostProvider",
    "PushbulletChannel",
    "Recipient",
    "notify_activities",
    "structure",
]
