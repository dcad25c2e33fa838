import re
from datetime import UTC, date, datetime

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_iso_date(value: str) -> bool:
    """Check for a real calendar date written as YYYY-MM-DD."""
    if not ISO_DATE_RE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def now() -> datetime:
    return datetime.now(UTC)
