'''
Conflict Detector

Advisory room double-booking checks. A conflict is reported with the sessions
it collides with; callers decide whether to warn, confirm or abort. Nothing
here raises on dangling references or returns anything but a result.
'''
from collections.abc import Sequence
from datetime import date
from typing import Optional
from uuid import UUID

from ..common.exceptions import TimetableValidationError
from ..models.catalog import Room, ScheduleCatalog
from ..models.conflicts import ConflictResult, RoomAvailability
from ..models.enums import EntryType
from ..models.timetable import ResolvedSession
from .schedule_resolver import effective_entries, to_session
from .time_windows import day_of_week, windows_overlap


def _others(entries: Sequence, candidate, exclude_id: Optional[UUID]) -> list:
    """Every entry except the one being edited (and the candidate itself, if it is stored)."""
    skip = {exclude_id, getattr(candidate, 'id', None)} - {None}
    return [e for e in entries if e.id not in skip]


def _weekly_clashes(candidate, others: Sequence) -> list:
    return [
        e for e in others
        if e.type == EntryType.REGULAR
        and e.day_of_week == candidate.day_of_week
        and e.room_id == candidate.room_id
        and windows_overlap(e, candidate)
    ]


def _clashes_on(session_date: date, candidate, others: Sequence) -> list:
    """
    Clashes for one concrete date. The candidate takes part in the override
    rule: a regular it would replace is not a clash, and if the candidate is
    itself replaced on that date it cannot clash at all.
    """
    effective = effective_entries(session_date, [*others, candidate])
    if not any(e is candidate for e in effective):
        return []
    return [
        e for e in effective
        if e is not candidate
        and e.room_id == candidate.room_id
        and windows_overlap(e, candidate)
    ]


def _describe(candidate, clashes: list[ResolvedSession]) -> str:
    first = clashes[0]
    room = first.room_name or "The room"
    if candidate.type == EntryType.SPECIAL:
        when = candidate.specific_date.isoformat()
    else:
        when = f"{candidate.day_of_week.label}s"
    message = (
        f"{room} is already booked on {when} at "
        f"{first.start_time:%H:%M}-{first.end_time:%H:%M}"
    )
    if first.subject_name:
        message += f" ({first.subject_name}, {first.class_name})"
    if len(clashes) > 1:
        message += f" and {len(clashes) - 1} more"
    return message + "."


def has_conflict(
    candidate,
    entries: Sequence,
    exclude_id: Optional[UUID] = None,
    reference_date: Optional[date] = None,
    catalog: Optional[ScheduleCatalog] = None,
) -> ConflictResult:
    """
    Checks whether `candidate` (a stored entry or a draft) would share its room
    with another effective session at an overlapping time.

    - Special candidate: checked on its own date.
    - Regular candidate, no `reference_date`: checked against the other regular
      sessions on the same weekday (a clash that repeats every week).
    - Regular candidate with `reference_date`: checked on that one occurrence,
      with that day's special sessions and overrides applied.
    """
    if not candidate.room_id:
        return ConflictResult(has_conflict=False, message="No room assigned.")

    others = _others(entries, candidate, exclude_id)

    if candidate.type == EntryType.SPECIAL:
        session_date = candidate.specific_date
        clashes = _clashes_on(session_date, candidate, others)
    elif reference_date is None:
        session_date = None
        clashes = _weekly_clashes(candidate, others)
    else:
        if day_of_week(reference_date) != candidate.day_of_week:
            raise TimetableValidationError(
                f"{reference_date.isoformat()} is not a {candidate.day_of_week.label}."
            )
        session_date = reference_date
        clashes = _clashes_on(session_date, candidate, others)

    if not clashes:
        return ConflictResult(has_conflict=False)

    # weekly clashes carry no session_date
    sessions = [to_session(e, session_date, catalog) for e in clashes]
    return ConflictResult(
        has_conflict=True,
        conflicts=sessions,
        message=_describe(candidate, sessions),
    )


def room_availability(
    candidate,
    rooms: Sequence[Room],
    entries: Sequence,
    exclude_id: Optional[UUID] = None,
    reference_date: Optional[date] = None,
    catalog: Optional[ScheduleCatalog] = None,
) -> list[RoomAvailability]:
    """
    Runs the conflict check for the candidate's window in every room, in room order.
    The candidate's own room choice is ignored.
    """
    availability = []
    for room in rooms:
        placed = candidate.model_copy(update={'room_id': room.id})
        result = has_conflict(placed, entries, exclude_id, reference_date, catalog)
        availability.append(RoomAvailability(
            room=room,
            has_conflict=result.has_conflict,
            conflicts=result.conflicts,
        ))
    return availability
