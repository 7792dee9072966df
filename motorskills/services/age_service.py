"""Calendar-aware age calculation for display."""

import calendar
from datetime import date, datetime, timezone


def _to_date(value: date | datetime | str) -> date:
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        return value.date()
    return value


def _is_last_day_of_month(value: date) -> bool:
    return value.day == calendar.monthrange(value.year, value.month)[1]


def calculate_age(
    birthdate: date | datetime | str,
    reference_date: date | datetime | str | None = None,
) -> tuple[int, int]:
    """Return ``(years, months)`` elapsed between birthdate and reference date.

    A month only counts once its day of month has been reached, so
    2015-06-15 -> 2024-06-14 is 8 years 11 months and 2015-06-15 ->
    2024-06-15 is 9 years 0 months. The last day of a month counts as
    reaching any later day, so 2015-01-31 -> 2015-02-28 is 1 month.
    """
    birth = _to_date(birthdate)
    ref = _to_date(reference_date) if reference_date is not None else datetime.now(timezone.utc).date()

    total_months = (ref.year - birth.year) * 12 + (ref.month - birth.month)
    if ref.day < birth.day and not _is_last_day_of_month(ref):
        total_months -= 1
    total_months = max(total_months, 0)
    return total_months // 12, total_months % 12


def format_age(
    birthdate: date | datetime | str,
    reference_date: date | datetime | str | None = None,
) -> str:
    """Format an age like ``'7 years 2 months'``."""
    years, months = calculate_age(birthdate, reference_date)
    return f"{years} years {months} months"
