'''
Schedule Resolver

Turns the stored weekly timetable plus its date-specific special sessions into
the sessions that actually happen on a given day.

Override rule: on a given date, a regular session is dropped when a special
session of the same class overlaps its time window. A wildcard special session
covers every class, while a wildcard regular session is only replaced by a
wildcard special session. Subject and faculty are not compared, so a special
session at an overlapping time always wins. A special session that overlaps
nothing is simply an extra session.
'''
import re
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from typing import Optional

from ..common.exceptions import TimetableValidationError
from ..models.catalog import ScheduleCatalog
from ..models.enums import EntryType
from ..models.timetable import (
    ClassSchedule,
    DaySchedule,
    OverrideRequest,
    RegularEntryDraft,
    ResolvedSession,
    ScheduleFilters,
    SpecialEntriesOverview,
    SpecialEntry,
    SpecialEntryDraft,
)
from .time_windows import (
    day_of_week,
    is_wildcard_class,
    special_covers_class,
    start_of_week,
    windows_overlap,
)


def is_overridden(regular: RegularEntryDraft, specials: Iterable[SpecialEntryDraft]) -> bool:
    """True when any of `specials` (assumed to be on the same date) replaces `regular`."""
    return any(
        special_covers_class(special.class_name, regular.class_name) and windows_overlap(special, regular)
        for special in specials
    )


def specials_on(target_date: date, entries: Iterable) -> list:
    return [
        e for e in entries
        if e.type == EntryType.SPECIAL and e.specific_date == target_date
    ]


def effective_entries(target_date: date, entries: Sequence) -> list:
    """
    Entries that effectively take place on `target_date`, in input order.
    Works on stored entries and drafts alike; the input is never modified.
    """
    weekday = day_of_week(target_date)
    specials = specials_on(target_date, entries)

    effective = []
    for entry in entries:
        if entry.type == EntryType.SPECIAL:
            if entry.specific_date == target_date:
                effective.append(entry)
        elif entry.day_of_week == weekday and not is_overridden(entry, specials):
            effective.append(entry)
    return effective


def matches_filters(entry, filters: Optional[ScheduleFilters]) -> bool:
    if filters is None:
        return True

    if filters.class_name and not is_wildcard_class(filters.class_name):
        if entry.class_name != filters.class_name and not is_wildcard_class(entry.class_name):
            return False

    # An entry without a division is taught to the whole class.
    if filters.division_id and entry.division_id and entry.division_id != filters.division_id:
        return False

    return True


def to_session(entry, session_date: Optional[date], catalog: Optional[ScheduleCatalog] = None) -> ResolvedSession:
    if catalog is None:
        return ResolvedSession(entry=entry, session_date=session_date)
    return ResolvedSession(
        entry=entry,
        session_date=session_date,
        subject_name=catalog.subject_name(entry.subject_id),
        faculty_name=catalog.faculty_name(entry.faculty_id),
        room_name=catalog.room_name(entry.room_id),
        division_name=catalog.division_name(entry.division_id),
    )


def resolve(
    target_date: date,
    entries: Sequence,
    filters: Optional[ScheduleFilters] = None,
    catalog: Optional[ScheduleCatalog] = None,
) -> list[ResolvedSession]:
    """
    Returns the sessions effectively scheduled on `target_date`, sorted by start time.
    Ties keep their order in `entries`.

    Overrides are decided on the whole day before `filters` are applied, so a
    filter can hide sessions but never resurrect an overridden one.
    """
    sessions = [
        to_session(entry, target_date, catalog)
        for entry in effective_entries(target_date, entries)
        if matches_filters(entry, filters)
    ]
    sessions.sort(key=lambda s: s.start_time)
    return sessions


def resolve_week(
    reference_date: date,
    entries: Sequence,
    filters: Optional[ScheduleFilters] = None,
    catalog: Optional[ScheduleCatalog] = None,
    first_day_of_week: Optional[int] = None,
) -> list[DaySchedule]:
    """Seven resolved days, starting at the beginning of the week containing `reference_date`."""
    week_start = start_of_week(reference_date, first_day_of_week)
    days = []
    for offset in range(7):
        current = week_start + timedelta(days=offset)
        days.append(DaySchedule(
            date=current,
            day_of_week=day_of_week(current),
            sessions=resolve(current, entries, filters, catalog),
        ))
    return days


def _class_sort_key(class_name: str) -> tuple:
    # '8th' < '9th' < '10th'; non-numeric labels (and the wildcard) go last
    match = re.match(r"\d+", class_name)
    if match:
        return (0, int(match.group()), class_name)
    return (1, 0, class_name)


def resolve_by_class(
    target_date: date,
    entries: Sequence,
    catalog: Optional[ScheduleCatalog] = None,
) -> list[ClassSchedule]:
    """The day's sessions grouped per class, e.g. for sending each class its schedule."""
    grouped: dict[str, list[ResolvedSession]] = {}
    for session in resolve(target_date, entries, catalog=catalog):
        grouped.setdefault(session.class_name, []).append(session)

    return [
        ClassSchedule(class_name=class_name, date=target_date, sessions=grouped[class_name])
        for class_name in sorted(grouped, key=_class_sort_key)
    ]


def partition_special_entries(entries: Iterable, reference_date: date) -> SpecialEntriesOverview:
    specials = sorted(
        (e for e in entries if e.type == EntryType.SPECIAL),
        key=lambda e: (e.specific_date, e.start_time),
    )
    return SpecialEntriesOverview(
        reference_date=reference_date,
        upcoming=[e for e in specials if e.specific_date >= reference_date],
        past=[e for e in specials if e.specific_date < reference_date],
    )


def build_override(regular, request: OverrideRequest) -> SpecialEntryDraft:
    """
    Builds the special session that replaces one occurrence of `regular`.
    The replacement must land on the regular session's weekday and overlap its
    window, otherwise it would not override anything.
    """
    if regular.type != EntryType.REGULAR:
        raise TimetableValidationError("Only regular sessions can be overridden.")

    if day_of_week(request.on_date) != regular.day_of_week:
        raise TimetableValidationError(
            f"{request.on_date.isoformat()} is a {day_of_week(request.on_date).label}, "
            f"but the session runs on {regular.day_of_week.label}s."
        )

    override = SpecialEntryDraft(
        class_name=regular.class_name,
        division_id=regular.division_id,
        subject_id=regular.subject_id,
        faculty_id=request.faculty_id or regular.faculty_id,
        room_id=request.room_id or regular.room_id,
        start_time=request.start_time or regular.start_time,
        end_time=request.end_time or regular.end_time,
        specific_date=request.on_date,
        event_type=request.event_type,
        notes=request.notes,
    )

    if not windows_overlap(override, regular):
        raise TimetableValidationError(
            "The new time does not overlap the regular session, so it would not replace it. "
            "Schedule an extra session instead."
        )
    return override


def overridden_by(special: SpecialEntry, entries: Sequence) -> list:
    """Regular entries that `special` suppresses on its date."""
    weekday = day_of_week(special.specific_date)
    return [
        e for e in entries
        if e.type == EntryType.REGULAR
        and e.day_of_week == weekday
        and is_overridden(e, [special])
    ]
