MODULE_ID = "pushbullet"
MODULE_VERSION = "0.2.0"
MODULE_DESCRIPTION = "Forward forum activity notifications to Pushbullet"

TABLES = [
    "activities.pushbullet",
]

PERMISSIONS = [
    "Plugins.PushbulletNotification.Allow",
]

IMPLEMENTS = ["NotificationChannel"]

REQUIRES = ["HostProvider"]


def register(registry, client=None):
    """Build the Pushbullet channel on the registry's host and register it under its channel name."""
    from pushbullet_notification.modules.pushbullet.pipeline import PushbulletChannel

    host = registry.host_for(MODULE_ID)
    if host is None:
        return None

    channel = PushbulletChannel(host, client=client)
    registry.register_channel(channel.channel, channel)
    return channel
