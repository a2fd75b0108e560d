from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current UTC time without tzinfo, matching the plain ``DateTime`` columns."""
    return datetime.now(UTC).replace(tzinfo=None)
