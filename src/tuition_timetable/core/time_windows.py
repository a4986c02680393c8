'''
Date and time-window arithmetic shared by the resolver, detector and occupancy engine.
'''
from datetime import date, time, timedelta
from typing import Optional, Protocol

from ..common.config import settings
from ..models.enums import DayOfWeek


class HasWindow(Protocol):
    start_time: time
    end_time: time


def windows_overlap(a: HasWindow, b: HasWindow) -> bool:
    """
    Half-open overlap test: back-to-back windows (10:00 end, 10:00 start) do not overlap.
    """
    return a.start_time < b.end_time and a.end_time > b.start_time


def day_of_week(d: date) -> DayOfWeek:
    """Sunday-based weekday of a date. Python's weekday() is Monday-based."""
    return DayOfWeek((d.weekday() + 1) % 7)


def next_day(reference_date: date) -> date:
    return reference_date + timedelta(days=1)


def start_of_week(reference_date: date, first_day_of_week: Optional[int] = None) -> date:
    """The most recent `first_day_of_week` on or before `reference_date`."""
    if first_day_of_week is None:
        first_day_of_week = settings.FIRST_DAY_OF_WEEK
    days_back = (day_of_week(reference_date) - first_day_of_week) % 7
    return reference_date - timedelta(days=days_back)


def is_wildcard_class(class_name: Optional[str]) -> bool:
    return class_name == settings.WILDCARD_CLASS


def special_covers_class(special_class: str, regular_class: str) -> bool:
    """A special session stands in for a regular one of the same class, or for any class when it is the wildcard."""
    return special_class == regular_class or is_wildcard_class(special_class)


def hour_slots(first_hour: int, last_hour: int) -> list[tuple[time, time]]:
    """
    One-hour slots starting at each hour from first_hour to last_hour inclusive.
    (7, 22) gives sixteen slots, 07:00-08:00 through 22:00-23:00.
    """
    if not 0 <= first_hour <= last_hour <= 22:
        raise ValueError(f"Invalid grid hours: {first_hour}-{last_hour}")
    return [(time(hour), time(hour + 1)) for hour in range(first_hour, last_hour + 1)]
