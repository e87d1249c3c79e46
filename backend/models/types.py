import datetime as _dt

from sqlalchemy.types import TypeDecorator, DateTime


def utcnow() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


def as_utc(value: _dt.datetime | str | None) -> _dt.datetime | None:
    """Normalize naive datetimes and ISO strings to tz-aware UTC.

    >>> as_utc("2026-01-02T03:04:05Z").isoformat()
    '2026-01-02T03:04:05+00:00'
    >>> as_utc(_dt.datetime(2026, 1, 2)).tzinfo
    datetime.timezone.utc
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = _dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=_dt.timezone.utc)
    return value.astimezone(_dt.timezone.utc)


class UtcAwareDateTime(TypeDecorator):
    """Always write UTC and always return tz-aware datetimes (UTC).

    SQLite drops the offset on the way in, so both directions go through as_utc.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)
