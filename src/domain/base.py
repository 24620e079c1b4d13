from datetime import UTC, datetime


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns (no timezone)."""
    return datetime.now(UTC).replace(tzinfo=None)


class DuplicateRecordError(Exception):
    """Raised by repositories when an insert or update hits a unique constraint."""
