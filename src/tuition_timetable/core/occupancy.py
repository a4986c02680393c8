'''
Occupancy Query Engine

Read-only room views built on the resolver's output for one day. There is no
booking logic here, so it always agrees with the conflict detector about which
rooms are taken.
'''
from collections.abc import Sequence
from datetime import date
from typing import Optional
from uuid import UUID

from ..common.config import settings
from ..models.catalog import Room, ScheduleCatalog
from ..models.occupancy import OccupancyCell, OccupancyGridRow, RoomInterval, RoomOccupancy
from ..models.timetable import ResolvedSession, TimeWindow
from .schedule_resolver import resolve
from .time_windows import hour_slots, windows_overlap


def _sessions_by_room(
    target_date: date,
    entries: Sequence,
    catalog: Optional[ScheduleCatalog] = None,
) -> dict[UUID, list[ResolvedSession]]:
    by_room: dict[UUID, list[ResolvedSession]] = {}
    for session in resolve(target_date, entries, catalog=catalog):
        if session.room_id:
            by_room.setdefault(session.room_id, []).append(session)
    return by_room


def occupancy(
    target_date: date,
    rooms: Sequence[Room],
    entries: Sequence,
    catalog: Optional[ScheduleCatalog] = None,
) -> list[RoomOccupancy]:
    """
    Booked intervals per room, in the order of `rooms`.
    Sessions in rooms that are not listed (e.g. deleted rooms) are left out.
    """
    by_room = _sessions_by_room(target_date, entries, catalog)
    return [
        RoomOccupancy(
            room=room,
            date=target_date,
            intervals=[
                RoomInterval(
                    entry_id=s.id,
                    start_time=s.start_time,
                    end_time=s.end_time,
                    subject_id=s.entry.subject_id,
                    subject_name=s.subject_name,
                    class_name=s.class_name,
                )
                for s in by_room.get(room.id, [])
            ],
        )
        for room in rooms
    ]


def free_rooms(
    target_date: date,
    window: TimeWindow,
    rooms: Sequence[Room],
    entries: Sequence,
) -> list[Room]:
    """Rooms with nothing booked that overlaps `window` on `target_date`."""
    by_room = _sessions_by_room(target_date, entries)
    return [
        room for room in rooms
        if not any(windows_overlap(s, window) for s in by_room.get(room.id, []))
    ]


def occupancy_grid(
    target_date: date,
    rooms: Sequence[Room],
    entries: Sequence,
    catalog: Optional[ScheduleCatalog] = None,
    first_hour: Optional[int] = None,
    last_hour: Optional[int] = None,
) -> list[OccupancyGridRow]:
    """
    Hour-by-hour occupancy per room. A cell is occupied when any session
    overlaps that hour; it shows the earliest such session.
    """
    if first_hour is None:
        first_hour = settings.OCCUPANCY_GRID_FIRST_HOUR
    if last_hour is None:
        last_hour = settings.OCCUPANCY_GRID_LAST_HOUR
    slots = [TimeWindow(start_time=start, end_time=end) for start, end in hour_slots(first_hour, last_hour)]

    by_room = _sessions_by_room(target_date, entries, catalog)
    grid = []
    for room in rooms:
        sessions = by_room.get(room.id, [])
        cells = []
        for slot in slots:
            hit = next((s for s in sessions if windows_overlap(s, slot)), None)
            if hit is None:
                cells.append(OccupancyCell(slot_start=slot.start_time, slot_end=slot.end_time))
            else:
                cells.append(OccupancyCell(
                    slot_start=slot.start_time,
                    slot_end=slot.end_time,
                    occupied=True,
                    entry_id=hit.id,
                    subject_name=hit.subject_name,
                    class_name=hit.class_name,
                ))
        grid.append(OccupancyGridRow(room=room, date=target_date, cells=cells))
    return grid
