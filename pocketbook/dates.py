"""Date utilities for pocketbook.

Pure functions for calendar-month windows, labels and date parsing. Every
function takes the reference instant explicitly; nothing here reads the clock.
"""

from datetime import date, datetime, timedelta

from pocketbook.domain.errors import InvalidWindowError
from pocketbook.domain.models import Month

Window = tuple[datetime, datetime]


def as_datetime(value: datetime | date) -> datetime:
    """Promote a plain date to midnight of that day; datetimes pass through."""
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def _first_of_next_month(start: datetime) -> datetime:
    return (start.replace(day=28) + timedelta(days=4)).replace(day=1)


def month_bounds(reference: datetime | date, months_ago: int = 0) -> Window:
    """Calculate the inclusive bounds of a calendar month.

    Args:
        reference: Instant whose month is "month 0".
        months_ago: How many months before the reference month to go back.

    Returns:
        Tuple of (start, end) where start is the first instant of the month
        and end the last one (23:59:59.999999 on its final day).

    Raises:
        ValueError: If months_ago is negative.
    """
    if months_ago < 0:
        raise ValueError(f"months_ago must be >= 0, got {months_ago}")

    reference = as_datetime(reference)
    year, month_index = divmod(reference.year * 12 + reference.month - 1 - months_ago, 12)
    start = datetime(year, month_index + 1, 1, tzinfo=reference.tzinfo)
    end = _first_of_next_month(start) - timedelta(microseconds=1)
    return start, end


def trailing_months(reference: datetime | date, count: int) -> list[Window]:
    """Calculate consecutive month windows ending with the reference month.

    Args:
        reference: Instant in the newest month of the sequence.
        count: Number of months, including the reference month.

    Returns:
        List of (start, end) windows, oldest first.

    Raises:
        InvalidWindowError: If count is less than 1.
    """
    if count < 1:
        raise InvalidWindowError(f"Month count must be at least 1, got {count}")

    return [month_bounds(reference, months_ago) for months_ago in range(count - 1, -1, -1)]


def month_label(instant: datetime | date) -> str:
    """Short month label, e.g. "Jan 2024"."""
    return instant.strftime("%b %Y")


def month_key(instant: datetime | date) -> Month:
    """Month key in YYYY-MM format."""
    return Month(instant.strftime("%Y-%m"))


def months_spanned(start: datetime | date, end: datetime | date) -> int:
    """Count calendar months from start's month to end's month, both included.

    Returns at least 1, so an end before the start still yields one month.
    """
    count = (end.year * 12 + end.month) - (start.year * 12 + start.month) + 1
    return max(count, 1)


def month_range(month: Month) -> tuple[str, str, str]:
    """Calculate date range and label for a month.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Tuple of (since_date, until_date, label) where:
        - since_date: First day of month (YYYY-MM-DD)
        - until_date: Last day of month (YYYY-MM-DD)
        - label: Human-readable month (e.g., "January 2025")
    """
    dt = datetime.strptime(month, "%Y-%m")
    since = dt.strftime("%Y-%m-01")
    until = (_first_of_next_month(dt) - timedelta(days=1)).strftime("%Y-%m-%d")
    label = dt.strftime("%B %Y")
    return since, until, label


def parse_date(raw: str) -> datetime:
    """Parse a stored ISO date (YYYY-MM-DD, optionally with a time part).

    Raises:
        ValueError: If the string is not an ISO date.
    """
    return datetime.fromisoformat(raw.strip())
