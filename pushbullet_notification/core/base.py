"""
core/base.py — Declarative Base and shared enums.

All ORM models import Base from here.
DeliveryStatus lives here because both the dispatch pipeline and the
reference SQL host need it, and neither should import the other.
"""

from enum import IntEnum
from typing import Optional

from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DeliveryStatus(IntEnum):
    """
    Outcome of the last push attempt for one activity.

    Values match the host's activity "sent" codes so the status can be
    stored in the same small-integer column the host already uses.
    0 / NULL in that column means the activity was never queued.
    """
    SENT = 2             # provider answered 200
    PENDING = 3          # queued, not yet attempted
    FATAL = 4            # rejected (4xx), bad payload, unknown recipient
    RETRYABLE_ERROR = 5  # provider 5xx or transient transport failure

    @property
    def is_terminal(self) -> bool:
        return self in (DeliveryStatus.SENT, DeliveryStatus.FATAL)

    @classmethod
    def from_column(cls, value) -> Optional["DeliveryStatus"]:
        """Map a raw column value (None, 0, or a code) to a status."""
        if value is None:
            return None
        try:
            return cls(int(value))
        except ValueError:
            return None


# Statuses the pipeline is allowed to (re)deliver.
DELIVERABLE_STATUSES = frozenset({DeliveryStatus.PENDING, DeliveryStatus.RETRYABLE_ERROR})
