"""
modules/pushbullet/models.py — the host's activity table, as the channel sees it.

The forum owns `activities`; this module only adds and writes the
`pushbullet` status column. structure() creates the table on a fresh
database, or adds the column to one that predates the channel.
"""

from sqlalchemy import Column, DateTime, Integer, SmallInteger, String, Text, inspect, text
from sqlalchemy.sql import func

from pushbullet_notification.core.base import Base

STATUS_COLUMN = "pushbullet"


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True)
    activity_type = Column(String(64), nullable=False)
    notify_user_id = Column(Integer, nullable=False, index=True)
    activity_user_id = Column(Integer, nullable=True)
    headline_format = Column(String(255), nullable=False)
    story = Column(Text, nullable=True)
    route = Column(String(255), nullable=False)
    data = Column(Text, nullable=True)  # JSON blob
    created_at = Column(DateTime, server_default=func.now())

    # 0 = not queued, otherwise a DeliveryStatus code
    pushbullet = Column(SmallInteger, nullable=False, default=0, server_default=text("0"))

    def __repr__(self):
        return f"<Activity {self.id}: {self.activity_type} for user {self.notify_user_id}>"


def structure(engine) -> None:
    """Create activities if missing and make sure it carries the status column."""
    Base.metadata.create_all(engine, tables=[Activity.__table__])
    columns = {c["name"] for c in inspect(engine).get_columns(Activity.__tablename__)}
    if STATUS_COLUMN not in columns:
        with engine.begin() as conn:
            conn.execute(text(
                f"ALTER TABLE {Activity.__tablename__} "
                f"ADD COLUMN {STATUS_COLUMN} SMALLINT NOT NULL DEFAULT 0"
            ))
