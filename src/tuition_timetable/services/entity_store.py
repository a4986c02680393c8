'''
Entity Store Service

Reads and writes rooms, reference records and timetable entries. Reads always
return a complete, fresh snapshot; the scheduling core only ever sees that
snapshot and never touches the database.
'''
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.engine import get_db_session
from ..database import models as db_models
from ..models.catalog import Division, Faculty, Room, RoomCreate, Subject, TimetableSnapshot
from ..models.enums import EntryType, EventType
from ..models.timetable import TimetableEntry, TimetableEntryDraft
from ..common.logger import log


ENTRY_ADAPTER = TypeAdapter(TimetableEntry)


class EntityStoreService:
    """
    Service for all persistence of timetable data.
    """
    def __init__(self, db: Annotated[AsyncSession, Depends(get_db_session)]):
        self.db = db

    # --- Row <-> Model Mapping ---

    @staticmethod
    def _to_entry(row: db_models.TimetableEntries) -> TimetableEntry:
        """Maps a flat row onto the Regular/Special union."""
        data = {
            "id": row.id,
            "type": row.entry_type,
            "class": row.class_name,
            "division_id": row.division_id,
            "subject_id": row.subject_id,
            "faculty_id": row.faculty_id,
            "room_id": row.room_id,
            "start_time": row.start_time,
            "end_time": row.end_time,
        }
        if row.entry_type == EntryType.REGULAR.value:
            data["day_of_week"] = row.day_of_week
        else:
            data["specific_date"] = row.specific_date
            data["event_type"] = row.event_type or EventType.SPECIAL_CLASS.value
            data["notes"] = row.notes
        return ENTRY_ADAPTER.validate_python(data)

    @staticmethod
    def _apply_draft(row: db_models.TimetableEntries, draft: TimetableEntryDraft) -> None:
        row.entry_type = draft.type
        row.class_name = draft.class_name
        row.division_id = draft.division_id
        row.subject_id = draft.subject_id
        row.faculty_id = draft.faculty_id
        row.room_id = draft.room_id
        row.start_time = draft.start_time
        row.end_time = draft.end_time

        if draft.type == EntryType.REGULAR.value:
            row.day_of_week = int(draft.day_of_week)
            row.specific_date = None
            row.event_type = None
            row.notes = None
        else:
            row.day_of_week = None
            row.specific_date = draft.specific_date
            row.event_type = draft.event_type
            row.notes = draft.notes

    # --- Reads ---

    async def get_all_entries(self) -> list[TimetableEntry]:
        """
        Every stored entry, ordered by creation time and then id. Rows created
        within the same timestamp tick come back in id order, not insertion order.
        Rows that no longer validate as entries are skipped and logged.
        """
        stmt = select(db_models.TimetableEntries).order_by(
            db_models.TimetableEntries.created_at,
            db_models.TimetableEntries.id
        )
        result = await self.db.execute(stmt)

        entries = []
        for row in result.scalars().all():
            try:
                entries.append(self._to_entry(row))
            except ValidationError as e:
                log.error(f"Skipping invalid timetable entry {row.id}: {e}")
        return entries

    async def get_all_rooms(self) -> list[Room]:
        stmt = select(db_models.Rooms).order_by(db_models.Rooms.name, db_models.Rooms.id)
        result = await self.db.execute(stmt)
        return [Room.model_validate(row) for row in result.scalars().all()]

    async def get_snapshot(self) -> TimetableSnapshot:
        """Reads the full collection of entries and reference records."""
        log.info("Loading timetable snapshot...")
        try:
            entries = await self.get_all_entries()
            rooms = await self.get_all_rooms()

            subjects_result = await self.db.execute(select(db_models.Subjects))
            faculty_result = await self.db.execute(select(db_models.Faculty))
            divisions_result = await self.db.execute(select(db_models.Divisions))

            snapshot = TimetableSnapshot(
                entries=entries,
                rooms=rooms,
                subjects=[Subject.model_validate(s) for s in subjects_result.scalars().all()],
                faculty=[Faculty.model_validate(f) for f in faculty_result.scalars().all()],
                divisions=[Division.model_validate(d) for d in divisions_result.scalars().all()],
            )
            log.info(f"Loaded snapshot with {len(snapshot.entries)} entries and {len(snapshot.rooms)} rooms.")
            return snapshot
        except Exception as e:
            log.error(f"Failed to load timetable snapshot: {e}", exc_info=True)
            raise

    async def _get_entry_orm_internal(self, entry_id: UUID) -> db_models.TimetableEntries:
        """
        Internal helper to fetch a single entry row by ID.
        Raises 404 if not found.
        """
        entry = await self.db.get(db_models.TimetableEntries, entry_id)
        if not entry:
            log.warning(f"Tried to fetch non-existing timetable entry: {entry_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Timetable entry not found.")
        return entry

    async def get_entry(self, entry_id: UUID) -> TimetableEntry:
        return self._to_entry(await self._get_entry_orm_internal(entry_id))

    # --- Entry Writes ---

    async def create_entry(self, draft: TimetableEntryDraft) -> TimetableEntry:
        new_entry = db_models.TimetableEntries()
        self._apply_draft(new_entry, draft)

        self.db.add(new_entry)
        await self.db.flush()
        await self.db.refresh(new_entry)
        log.info(f"Created {draft.type} timetable entry {new_entry.id} for class {draft.class_name}.")
        return self._to_entry(new_entry)

    async def update_entry(self, entry_id: UUID, draft: TimetableEntryDraft) -> TimetableEntry:
        entry_to_update = await self._get_entry_orm_internal(entry_id)
        self._apply_draft(entry_to_update, draft)

        self.db.add(entry_to_update)
        await self.db.flush()
        await self.db.refresh(entry_to_update)
        log.info(f"Updated timetable entry {entry_id}.")
        return self._to_entry(entry_to_update)

    async def delete_entry(self, entry_id: UUID) -> bool:
        entry_to_delete = await self._get_entry_orm_internal(entry_id)
        await self.db.delete(entry_to_delete)
        await self.db.flush()
        log.info(f"Deleted timetable entry {entry_id}.")
        return True

    # --- Room Writes ---

    async def _get_room_orm_internal(self, room_id: UUID) -> db_models.Rooms:
        room = await self.db.get(db_models.Rooms, room_id)
        if not room:
            log.warning(f"Tried to fetch non-existing room: {room_id}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found.")
        return room

    async def create_room(self, data: RoomCreate) -> Room:
        new_room = db_models.Rooms(
            name=data.name,
            capacity=data.capacity,
            description=data.description,
        )
        self.db.add(new_room)
        await self.db.flush()
        await self.db.refresh(new_room)
        log.info(f"Created room {new_room.id} ({new_room.name}).")
        return Room.model_validate(new_room)

    async def update_room(self, room_id: UUID, data: RoomCreate) -> Room:
        """Replaces a room's name, capacity and description. Entries keep pointing at it."""
        room_to_update = await self._get_room_orm_internal(room_id)
        room_to_update.name = data.name
        room_to_update.capacity = data.capacity
        room_to_update.description = data.description

        self.db.add(room_to_update)
        await self.db.flush()
        await self.db.refresh(room_to_update)
        log.info(f"Updated room {room_id} ({room_to_update.name}).")
        return Room.model_validate(room_to_update)

    async def delete_room(self, room_id: UUID) -> bool:
        """
        Deletes a room. Entries that still point at it keep the dangling id
        and resolve without a room name.
        """
        room = await self._get_room_orm_internal(room_id)
        await self.db.delete(room)
        await self.db.flush()
        log.info(f"Deleted room {room_id}.")
        return True
