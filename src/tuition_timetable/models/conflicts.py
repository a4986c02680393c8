'''
Conflict Detection API Models
'''
from typing import Optional
from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from .catalog import Room
from .timetable import ResolvedSession, TimetableEntryDraft


class ConflictCheckRequest(BaseModel):
    """
    Payload for an advisory room-conflict check.
    `exclude_id` is the entry being edited; `reference_date` pins a regular
    candidate to one concrete occurrence.
    """
    candidate: TimetableEntryDraft
    exclude_id: Optional[UUID] = None
    reference_date: Optional[date] = None


class ConflictResult(BaseModel):
    """
    The outcome of a room-conflict check. A conflict is a warning, never a rejection.
    """
    has_conflict: bool = False
    conflicts: list[ResolvedSession] = Field(default_factory=list)
    message: Optional[str] = None

    @property
    def first(self) -> Optional[ResolvedSession]:
        return self.conflicts[0] if self.conflicts else None


class RoomAvailability(BaseModel):
    """A room flagged with whether a candidate window would clash there."""
    room: Room
    has_conflict: bool
    conflicts: list[ResolvedSession] = Field(default_factory=list)
