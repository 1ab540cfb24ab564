"""Inclusive date-interval arithmetic shared by the vacation engine and its queries."""

from datetime import date, timedelta
from typing import Iterator

SATURDAY = 5


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in [start, end], both ends included."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def total_day_span(start: date, end: date) -> int:
    """Inclusive number of calendar days between start and end."""
    return (end - start).days + 1


def business_day_span(start: date, end: date) -> int:
    """Days in [start, end] that fall Monday to Friday. No holiday calendar."""
    return sum(1 for d in iter_days(start, end) if d.weekday() < SATURDAY)


def weekend_day_span(start: date, end: date) -> int:
    return sum(1 for d in iter_days(start, end) if d.weekday() >= SATURDAY)


def intervals_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """True if the inclusive ranges share at least one day; touching ends overlap."""
    return a_start <= b_end and b_start <= a_end
