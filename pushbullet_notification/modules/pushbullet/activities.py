"""
Activity rows <-> ActivityEvent, and the save-transaction flow around them.

A host that stores activities in the `activities` table (see models.py)
calls notify_activities() just before committing:

    with Session(engine) as db:
        db.add_all(new_rows)
        notify_activities(db, channel, new_rows, fields=names_for)
        db.commit()

`fields` is the host's hook for headline values the row does not carry
itself, such as display names.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from sqlalchemy.orm import Session

from pushbullet_notification.core.base import DeliveryStatus
from pushbullet_notification.core.interfaces.host import ActivityEvent
from pushbullet_notification.modules.pushbullet.models import Activity
from pushbullet_notification.modules.pushbullet.pipeline import DispatchBatch, PushbulletChannel

log = logging.getLogger("pushbullet.activities")

FieldsHook = Callable[[Activity], dict[str, Any]]


def to_event(activity: Activity, fields: Optional[FieldsHook] = None) -> ActivityEvent:
    values = {
        "ActivityID": activity.id,
        "ActivityType": activity.activity_type,
        "NotifyUserID": activity.notify_user_id,
        "ActivityUserID": activity.activity_user_id,
        "Story": activity.story,
        "Route": activity.route,
    }
    if fields is not None:
        values.update(fields(activity))
    return ActivityEvent(
        activity_id=activity.id,
        notify_user_id=activity.notify_user_id,
        activity_type=activity.activity_type,
        headline_format=activity.headline_format,
        route=activity.route,
        fields=values,
        data=activity.data,
        delivery_status=DeliveryStatus.from_column(activity.pushbullet),
    )


def persist_status(activity: Activity, event: ActivityEvent) -> None:
    activity.pushbullet = int(event.delivery_status) if event.delivery_status is not None else 0


def notify_activities(
    db: Session,
    channel: PushbulletChannel,
    activities: Iterable[Activity],
    fields: Optional[FieldsHook] = None,
) -> list[ActivityEvent]:
    """
    Run the channel over activities saved in the current transaction.

    Flushes so new rows get ids, queues the opted-in ones, delivers the batch
    and writes each status back. The caller commits.
    """
    activities = list(activities)
    db.flush()

    batch = DispatchBatch()
    pairs = []
    for activity in activities:
        event = to_event(activity, fields)
        if event.delivery_status is None:
            channel.on_event_created(event, batch)
        else:
            # A RETRYABLE_ERROR from an earlier save gets its next attempt here.
            batch.add(event)
        pairs.append((activity, event))

    channel.dispatch_batch(batch)

    for activity, event in pairs:
        persist_status(activity, event)
    db.flush()
    log.debug(f"Processed {len(pairs)} activities for Pushbullet")
    return [event for _, event in pairs]
