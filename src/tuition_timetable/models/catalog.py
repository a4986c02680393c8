'''
Reference records used by the timetable: rooms, subjects, faculty and divisions.
'''
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .timetable import TimetableEntry


class RoomCreate(BaseModel):
    """
    Pydantic model for validating the JSON payload when CREATING a room.
    """
    name: str = Field(..., min_length=1, max_length=100)
    capacity: Optional[int] = Field(None, gt=0)
    description: Optional[str] = Field(None, max_length=500)


class Room(RoomCreate):
    id: UUID

    model_config = ConfigDict(from_attributes=True)


class Subject(BaseModel):
    id: UUID
    name: str
    class_name: Optional[str] = Field(None, alias="class")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Faculty(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class Division(BaseModel):
    """A named sub-section of a class, e.g. 'Division A' of the 9th."""
    id: UUID
    class_name: str = Field(..., alias="class")
    name: str

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ScheduleCatalog(BaseModel):
    """
    Display-name lookups for resolved sessions.
    Every lookup returns None for an unknown id instead of raising.
    """
    rooms: list[Room] = []
    subjects: list[Subject] = []
    faculty: list[Faculty] = []
    divisions: list[Division] = []

    _room_names: dict[UUID, str] = PrivateAttr(default_factory=dict)
    _subject_names: dict[UUID, str] = PrivateAttr(default_factory=dict)
    _faculty_names: dict[UUID, str] = PrivateAttr(default_factory=dict)
    _division_names: dict[UUID, str] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._room_names = {r.id: r.name for r in self.rooms}
        self._subject_names = {s.id: s.name for s in self.subjects}
        self._faculty_names = {f.id: f.name for f in self.faculty}
        self._division_names = {d.id: d.name for d in self.divisions}

    def room_name(self, room_id: Optional[UUID]) -> Optional[str]:
        return self._room_names.get(room_id) if room_id else None

    def subject_name(self, subject_id: Optional[UUID]) -> Optional[str]:
        return self._subject_names.get(subject_id) if subject_id else None

    def faculty_name(self, faculty_id: Optional[UUID]) -> Optional[str]:
        return self._faculty_names.get(faculty_id) if faculty_id else None

    def division_name(self, division_id: Optional[UUID]) -> Optional[str]:
        return self._division_names.get(division_id) if division_id else None


class TimetableSnapshot(ScheduleCatalog):
    """The full entity collection as read from the store at one point in time."""
    entries: list[TimetableEntry] = []

    @property
    def catalog(self) -> ScheduleCatalog:
        return self
