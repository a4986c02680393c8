'''
API endpoints for Rooms and their occupancy.
'''
from typing import Annotated, Any, List
from uuid import UUID
from datetime import date, time

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import ValidationError

from ..models import catalog as catalog_models
from ..models import conflicts as conflict_models
from ..models import occupancy as occupancy_models
from ..models.timetable import TimeWindow
from ..services.room_service import RoomService
from ..services.timetable_service import unprocessable


class RoomsAPI:
    """
    A class to encapsulate endpoints for Rooms.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/rooms",
            tags=["Rooms"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/",
                self.list_rooms,
                methods=["GET"],
                response_model=List[catalog_models.Room])

        self.router.add_api_route(
                "/",
                self.create_room,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=catalog_models.Room)

        self.router.add_api_route(
                "/occupancy",
                self.get_occupancy,
                methods=["GET"],
                response_model=List[occupancy_models.RoomOccupancy])

        self.router.add_api_route(
                "/occupancy/grid",
                self.get_occupancy_grid,
                methods=["GET"],
                response_model=List[occupancy_models.OccupancyGridRow])

        self.router.add_api_route(
                "/free",
                self.get_free_rooms,
                methods=["GET"],
                response_model=List[catalog_models.Room])

        self.router.add_api_route(
                "/availability",
                self.get_room_availability,
                methods=["POST"],
                response_model=List[conflict_models.RoomAvailability])

        self.router.add_api_route(
                "/{room_id}",
                self.update_room,
                methods=["PUT"],
                response_model=catalog_models.Room)

        self.router.add_api_route(
                "/{room_id}",
                self.delete_room,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT)

    async def list_rooms(
        self,
        room_service: Annotated[RoomService, Depends(RoomService)]
    ) -> List[Any]:
        return await room_service.get_all_rooms_for_api()

    async def create_room(
        self,
        room_data: catalog_models.RoomCreate,
        room_service: Annotated[RoomService, Depends(RoomService)]
    ) -> Any:
        return await room_service.create_room_for_api(room_data)

    async def update_room(
        self,
        room_id: UUID,
        room_data: catalog_models.RoomCreate,
        room_service: Annotated[RoomService, Depends(RoomService)]
    ) -> Any:
        """
        Renames a room or changes its capacity or description.
        """
        return await room_service.update_room_for_api(room_id, room_data)

    async def delete_room(
        self,
        room_id: UUID,
        room_service: Annotated[RoomService, Depends(RoomService)]
    ):
        """
        Deletes a room. Entries that referenced it resolve without a room name.
        """
        await room_service.delete_room(room_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def get_occupancy(
        self,
        room_service: Annotated[RoomService, Depends(RoomService)],
        target_date: Annotated[date, Query(alias="date")]
    ) -> List[Any]:
        """
        Retrieves every room's booked intervals on a day.
        """
        return await room_service.get_occupancy_for_api(target_date)

    async def get_occupancy_grid(
        self,
        room_service: Annotated[RoomService, Depends(RoomService)],
        target_date: Annotated[date, Query(alias="date")]
    ) -> List[Any]:
        """
        Retrieves the hour-by-hour occupancy grid for a day.
        """
        return await room_service.get_occupancy_grid_for_api(target_date)

    async def get_free_rooms(
        self,
        room_service: Annotated[RoomService, Depends(RoomService)],
        target_date: Annotated[date, Query(alias="date")],
        start_time: Annotated[time, Query()],
        end_time: Annotated[time, Query()]
    ) -> List[Any]:
        """
        Retrieves the rooms with nothing booked in [start_time, end_time) on a day.
        """
        try:
            window = TimeWindow(start_time=start_time, end_time=end_time)
        except ValidationError as e:
            raise unprocessable(e)
        return await room_service.get_free_rooms_for_api(target_date, window)

    async def get_room_availability(
        self,
        request: conflict_models.ConflictCheckRequest,
        room_service: Annotated[RoomService, Depends(RoomService)]
    ) -> List[Any]:
        """
        Flags every room with whether the candidate's window would clash there.
        """
        return await room_service.get_room_availability_for_api(request)

# Instantiate the class and export its router
rooms_api = RoomsAPI()
router = rooms_api.router
