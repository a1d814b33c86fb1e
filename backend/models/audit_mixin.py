from sqlalchemy import Column, DateTime, String
from datetime import datetime
import pytz

from database import APP_TIMEZONE


def now_local():
    return datetime.now(pytz.timezone(APP_TIMEZONE))


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Ledger rows are hard-deleted (journal entries only ever disappear through a
    reversal), so there are no soft-delete columns here.
    """
    # DateTime(timezone=True) ensures the timezone info is persisted in the database.
    created_at = Column(DateTime(timezone=True), default=now_local)
    updated_at = Column(DateTime(timezone=True), onupdate=now_local)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
