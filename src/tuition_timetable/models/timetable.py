'''
Timetable API Models
'''
from typing import Annotated, Literal, Optional, Union
from datetime import date, time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import DayOfWeek, EntryType, EventType


class TimeWindow(BaseModel):
    """
    A same-day, half-open [start_time, end_time) window.
    Every timetable entry is one, and so is every occupancy query.
    """
    start_time: time
    end_time: time

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def check_window_order(self) -> 'TimeWindow':
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


# --- Entry Drafts (Input) ---

class EntryBase(TimeWindow):
    """
    Fields shared by both entry variants.
    'class' is a grade label such as '8th'; the wildcard grade is 'All'.
    """
    class_name: str = Field(..., alias="class", min_length=1, max_length=50)
    division_id: Optional[UUID] = None
    subject_id: UUID
    faculty_id: UUID
    room_id: Optional[UUID] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True, from_attributes=True)

    @field_validator('class_name', mode='before')
    @classmethod
    def strip_class_name(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator('room_id', 'division_id', mode='before')
    @classmethod
    def blank_reference_is_none(cls, value):
        # forms send "" for "no room" / "all divisions"
        if isinstance(value, str) and not value.strip():
            return None
        return value


class RegularEntryDraft(EntryBase):
    """A weekly recurring session that has not been stored yet."""
    type: Literal["Regular"] = EntryType.REGULAR.value
    day_of_week: DayOfWeek = Field(..., description="0=Sunday, 6=Saturday")


class SpecialEntryDraft(EntryBase):
    """A one-off session on a single calendar date that has not been stored yet."""
    type: Literal["Special"] = EntryType.SPECIAL.value
    specific_date: date
    event_type: str = Field(EventType.SPECIAL_CLASS.value, min_length=1, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator('event_type', mode='before')
    @classmethod
    def strip_event_type(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator('notes', mode='before')
    @classmethod
    def blank_notes_is_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value


TimetableEntryDraft = Annotated[
    Union[RegularEntryDraft, SpecialEntryDraft],
    Field(discriminator='type')
]


# --- Stored Entries ---

class RegularEntry(RegularEntryDraft):
    id: UUID


class SpecialEntry(SpecialEntryDraft):
    id: UUID


TimetableEntry = Annotated[
    Union[RegularEntry, SpecialEntry],
    Field(discriminator='type')
]


# --- Resolver Output ---

class ScheduleFilters(BaseModel):
    """Optional narrowing of a resolved day. None (or the wildcard class) means no filter."""
    class_name: Optional[str] = None
    division_id: Optional[UUID] = None


class ResolvedSession(BaseModel):
    """
    An entry that is effectively scheduled on `session_date`, after the override rule.
    Display fields are None when the referenced record no longer exists.
    """
    entry: TimetableEntry
    session_date: Optional[date] = Field(None, description="None for a clash that recurs every week.")
    subject_name: Optional[str] = None
    faculty_name: Optional[str] = None
    room_name: Optional[str] = None
    division_name: Optional[str] = None

    @property
    def id(self) -> UUID:
        return self.entry.id

    @property
    def start_time(self) -> time:
        return self.entry.start_time

    @property
    def end_time(self) -> time:
        return self.entry.end_time

    @property
    def room_id(self) -> Optional[UUID]:
        return self.entry.room_id

    @property
    def class_name(self) -> str:
        return self.entry.class_name

    def __str__(self) -> str:
        subject = self.subject_name or "Unknown Subject"
        when = f"{self.session_date:%b %d}" if self.session_date else "Weekly"
        return (
            f"{when} @ {self.start_time:%H:%M}–{self.end_time:%H:%M}: "
            f"{subject} ({self.class_name})"
        )


class DaySchedule(BaseModel):
    date: date
    day_of_week: DayOfWeek
    sessions: list[ResolvedSession]


class ClassSchedule(BaseModel):
    class_name: str = Field(..., alias="class")
    date: date
    sessions: list[ResolvedSession]

    model_config = ConfigDict(populate_by_name=True)


class SpecialEntriesOverview(BaseModel):
    """Special sessions split around a reference date (today counts as upcoming)."""
    reference_date: date
    upcoming: list[SpecialEntry]
    past: list[SpecialEntry]


class OverrideRequest(BaseModel):
    """
    Replaces one occurrence of a regular session with a special one.
    Omitted fields are copied from the regular entry.
    """
    on_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    faculty_id: Optional[UUID] = None
    room_id: Optional[UUID] = None
    event_type: str = Field(EventType.REPLACEMENT.value, min_length=1, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)
