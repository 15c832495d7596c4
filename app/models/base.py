from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import event
from datetime import datetime, timezone


class Base(DeclarativeBase):
    pass


def now_utc() -> datetime:
    """Zwraca aktualny czas UTC z informacją o timezone."""
    return datetime.now(timezone.utc)


# SQLite gubi timezone przy zapisie — przy odczycie zakładamy UTC (tak zapisujemy)
@event.listens_for(Base, "load", propagate=True)
def receive_load(target, context):
    for key in target.__mapper__.columns.keys():
        value = getattr(target, key, None)
        if isinstance(value, datetime) and value.tzinfo is None:
            setattr(target, key, value.replace(tzinfo=timezone.utc))


@event.listens_for(Base, "refresh", propagate=True)
def receive_refresh(target, context, attrs):
    receive_load(target, context)
