'''
Room Service
'''
from typing import Annotated
from uuid import UUID
from datetime import date

from fastapi import Depends

from ..core import conflict_detector, occupancy
from ..common.exceptions import TimetableValidationError
from ..common.logger import log
from ..models.catalog import Room, RoomCreate
from ..models.conflicts import ConflictCheckRequest, RoomAvailability
from ..models.occupancy import OccupancyGridRow, RoomOccupancy
from ..models.timetable import TimeWindow
from .entity_store import EntityStoreService
from .timetable_service import unprocessable


class RoomService:
    """
    Service for rooms and the occupancy views derived from the resolved timetable.
    """
    def __init__(
        self,
        store: Annotated[EntityStoreService, Depends(EntityStoreService)]
    ):
        self.store = store

    async def get_all_rooms_for_api(self) -> list[Room]:
        return await self.store.get_all_rooms()

    async def create_room_for_api(self, data: RoomCreate) -> Room:
        log.info(f"Creating room '{data.name}'.")
        return await self.store.create_room(data)

    async def update_room_for_api(self, room_id: UUID, data: RoomCreate) -> Room:
        log.info(f"Updating room {room_id}.")
        return await self.store.update_room(room_id, data)

    async def delete_room(self, room_id: UUID) -> bool:
        log.info(f"Deleting room {room_id}.")
        return await self.store.delete_room(room_id)

    async def get_occupancy_for_api(self, target_date: date) -> list[RoomOccupancy]:
        log.info(f"Computing room occupancy for {target_date.isoformat()}.")
        snapshot = await self.store.get_snapshot()
        return occupancy.occupancy(target_date, snapshot.rooms, snapshot.entries, snapshot.catalog)

    async def get_occupancy_grid_for_api(self, target_date: date) -> list[OccupancyGridRow]:
        log.info(f"Computing hourly occupancy grid for {target_date.isoformat()}.")
        snapshot = await self.store.get_snapshot()
        return occupancy.occupancy_grid(target_date, snapshot.rooms, snapshot.entries, snapshot.catalog)

    async def get_free_rooms_for_api(self, target_date: date, window: TimeWindow) -> list[Room]:
        log.info(
            f"Finding free rooms on {target_date.isoformat()} "
            f"{window.start_time:%H:%M}-{window.end_time:%H:%M}."
        )
        snapshot = await self.store.get_snapshot()
        free = occupancy.free_rooms(target_date, window, snapshot.rooms, snapshot.entries)
        log.info(f"{len(free)} of {len(snapshot.rooms)} rooms are free.")
        return free

    async def get_room_availability_for_api(self, request: ConflictCheckRequest) -> list[RoomAvailability]:
        """Every room flagged with whether the candidate's window would clash there."""
        snapshot = await self.store.get_snapshot()
        try:
            return conflict_detector.room_availability(
                request.candidate,
                snapshot.rooms,
                snapshot.entries,
                exclude_id=request.exclude_id,
                reference_date=request.reference_date,
                catalog=snapshot.catalog,
            )
        except TimetableValidationError as e:
            raise unprocessable(e)
