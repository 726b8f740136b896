import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class IdMixin:
    id = Column(String(64), primary_key=True, default=new_id)


# MySQL DATETIME drops fractions unless fsp is given
Timestamp = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")


class TimestampMixin:
    # Python-side defaults keep microsecond precision for newest-first ordering
    created_at = Column(Timestamp, default=_utcnow, nullable=False)
    updated_at = Column(Timestamp, default=_utcnow, onupdate=_utcnow, nullable=False)
