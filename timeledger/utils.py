import calendar
import datetime
from decimal import Decimal
from typing import Tuple, Union

HOURS_QUANTUM = Decimal("0.01")


def normalize_date(value: Union[datetime.date, datetime.datetime]) -> datetime.date:
    """
    Drop any time-of-day component so the value can be used as an aggregation key.

    Args:
        value: A date or a datetime

    Returns:
        The calendar date
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    return value


def to_hours(value) -> Decimal:
    """Coerce a stored or summed hours value to a two-place Decimal (None -> 0)"""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(HOURS_QUANTUM)


def month_bounds(year: int, month: int) -> Tuple[datetime.date, datetime.date]:
    """Return (first day, first day of the following month) for a month"""
    start = datetime.date(year, month, 1)
    _, last_day = calendar.monthrange(year, month)
    return start, start + datetime.timedelta(days=last_day)
