'''
Room Occupancy API Models
'''
from typing import Optional
from datetime import date, time
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .catalog import Room


class RoomInterval(BaseModel):
    """One booked interval of a room on a given day."""
    entry_id: UUID
    start_time: time
    end_time: time
    subject_id: UUID
    subject_name: Optional[str] = None
    class_name: str = Field(..., alias="class")

    model_config = ConfigDict(populate_by_name=True)


class RoomOccupancy(BaseModel):
    room: Room
    date: date
    intervals: list[RoomInterval]

    @property
    def is_empty(self) -> bool:
        return not self.intervals


class OccupancyCell(BaseModel):
    """A one-hour cell of the occupancy grid."""
    slot_start: time
    slot_end: time
    occupied: bool = False
    entry_id: Optional[UUID] = None
    subject_name: Optional[str] = None
    class_name: Optional[str] = Field(None, alias="class")

    model_config = ConfigDict(populate_by_name=True)


class OccupancyGridRow(BaseModel):
    room: Room
    date: date
    cells: list[OccupancyCell]
