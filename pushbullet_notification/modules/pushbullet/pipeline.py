"""
Pushbullet dispatch pipeline.

Two hooks, both called synchronously by the host:

  on_event_created(event, batch)
      Creation-time gate. Configured and opted in -> status PENDING and the
      event joins the save transaction's batch. Otherwise nothing is written.

  on_event_persisting(event)
      Send-time state machine, one pass per host save:
        1. not configured                      -> stop, status untouched
        2. status not PENDING/RETRYABLE_ERROR  -> stop (SENT/FATAL are terminal)
        3. render headline + URL               -> FormatError => FATAL
        4. resolve recipient                   -> not found   => FATAL
        5. send                                -> classification

Preferences are only consulted at creation time, so a retry on a later
save never re-asks the host.

dispatch_batch(batch) runs step 1-5 for a whole batch on a bounded thread
pool; each event is attempted at most once per batch.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from pushbullet_notification.core.base import DELIVERABLE_STATUSES, DeliveryStatus
from pushbullet_notification.core.config import settings
from pushbullet_notification.core.interfaces.host import ActivityEvent, HostProvider
from pushbullet_notification.core.interfaces.notification import NotificationChannel
from pushbullet_notification.modules.pushbullet.client import DispatchRequest, PushbulletClient
from pushbullet_notification.modules.pushbullet.errors import (
    NotConfigured,
    PushbulletError,
    RecipientNotFound,
)
from pushbullet_notification.modules.pushbullet.formatter import MessageFormatter
from pushbullet_notification.modules.pushbullet.gate import ConfigurationGate
from pushbullet_notification.modules.pushbullet.preferences import (
    PreferenceFilter,
    group_definitions,
    synthesize_preferences,
)

log = logging.getLogger("pushbullet.dispatch")


class DispatchBatch:
    """
    Events queued during one host save transaction.

    Owned by the transaction that creates it. Adding the same event twice
    (same activity_id, or the same object when it has no id yet) is a no-op.
    """

    def __init__(self):
        self._events: dict[object, ActivityEvent] = {}

    @staticmethod
    def _key(event: ActivityEvent):
        if event.activity_id is not None:
            return ("id", event.activity_id)
        return ("obj", id(event))

    def add(self, event: ActivityEvent) -> bool:
        key = self._key(event)
        if key in self._events:
            return False
        self._events[key] = event
        return True

    def drain(self) -> list[ActivityEvent]:
        events = list(self._events.values())
        self._events.clear()
        return events

    def __contains__(self, event: ActivityEvent) -> bool:
        return self._key(event) in self._events

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(list(self._events.values()))


class PushbulletChannel(NotificationChannel):
    """Pushbullet delivery for host activities."""

    def __init__(
        self,
        host: HostProvider,
        client: PushbulletClient = None,
        channel: str = None,
        max_workers: int = None,
    ):
        self.host = host
        self.channel = channel or settings.pushbullet_channel
        self.max_workers = max(1, max_workers or settings.pushbullet_max_workers)
        self.gate = ConfigurationGate(host)
        self.preferences = PreferenceFilter(host, self.channel)
        self.formatter = MessageFormatter(host)
        self._owns_client = client is None
        self.client = client or PushbulletClient()

    def close(self):
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def is_configured(self) -> bool:
        return self.gate.is_configured()

    # ------------------------------------------------------------------
    # Preference screen
    # ------------------------------------------------------------------

    def on_preferences_defined(self, definitions: dict, viewer_user_id: int) -> dict:
        if not self.is_configured() or not self.preferences.can_configure(viewer_user_id):
            return definitions
        return synthesize_preferences(definitions, self.channel)

    def preference_screen(self, viewer_user_id: int) -> dict:
        """The host's notification preferences, grouped, with this channel's column when allowed."""
        definitions = group_definitions(self.host.preference_definitions())
        return self.on_preferences_defined(definitions, viewer_user_id)

    # ------------------------------------------------------------------
    # Creation-time gate
    # ------------------------------------------------------------------

    def on_event_created(self, event: ActivityEvent, batch: DispatchBatch) -> bool:
        # Already queued or already attempted; only PENDING/RETRYABLE_ERROR move on,
        # and that happens at send time.
        if event.delivery_status is not None:
            return False

        try:
            if not self.is_configured():
                log.debug("Pushbullet not configured, skipping queue")
                return False
            if not self.preferences.is_opted_in(event.notify_user_id, event.preference_suffix):
                return False
        except Exception as e:
            log.error(
                f"Could not decide whether to queue activity {event.activity_id}: {e}",
                exc_info=True,
            )
            return False

        event.delivery_status = DeliveryStatus.PENDING
        batch.add(event)
        return True

    # ------------------------------------------------------------------
    # Send-time state machine
    # ------------------------------------------------------------------

    def on_event_persisting(self, event: ActivityEvent) -> Optional[DeliveryStatus]:
        try:
            credential = self.gate.require_credential()
        except NotConfigured:
            log.debug(f"Pushbullet not configured, activity {event.activity_id} left as is")
            return event.delivery_status
        except Exception as e:
            log.error(
                f"Could not read the Pushbullet credential for activity {event.activity_id}: {e}",
                exc_info=True,
            )
            return event.delivery_status

        if event.delivery_status not in DELIVERABLE_STATUSES:
            return event.delivery_status

        try:
            status = self._deliver(event, credential)
        except PushbulletError as e:
            log.warning(f"Activity {event.activity_id} for user {event.notify_user_id} failed: {e}")
            status = e.status
        except Exception as e:
            log.error(
                f"Unexpected error delivering activity {event.activity_id}: {e}",
                exc_info=True,
            )
            status = DeliveryStatus.FATAL

        event.delivery_status = status
        return status

    def _deliver(self, event: ActivityEvent, credential: str) -> DeliveryStatus:
        message = self.formatter.render(event)

        recipient = self.host.lookup_user(event.notify_user_id)
        if recipient is None or not recipient.email:
            raise RecipientNotFound(event.notify_user_id)

        request = DispatchRequest(
            headline=message.headline,
            url=message.url,
            email=recipient.email,
            credential=credential,
        )
        return self.client.send(request)

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def dispatch_batch(self, batch: DispatchBatch) -> list:
        """Deliver every queued event. Returns [(event, status)] in queue order."""
        events = batch.drain()
        if not events:
            return []
        try:
            configured = self.is_configured()
        except Exception as e:
            log.error(f"Could not read the Pushbullet credential, batch left as is: {e}", exc_info=True)
            return []
        if not configured:
            return []

        workers = min(self.max_workers, len(events))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pushbullet") as pool:
            statuses = list(pool.map(self.on_event_persisting, events))

        sent = sum(1 for s in statuses if s is DeliveryStatus.SENT)
        log.info(f"Dispatched {len(events)} Pushbullet activities, {sent} sent")
        return list(zip(events, statuses))
