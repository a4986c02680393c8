'''
API endpoints for the resolved timetable and its entries.
'''
from typing import Annotated, Any, Optional, Union
from uuid import UUID
from datetime import date

from fastapi import APIRouter, Body, Depends, Query, Response, status

from ..models import conflicts as conflict_models
from ..models import timetable as timetable_models
from ..services.timetable_service import TimetableService

StoredEntry = Union[timetable_models.RegularEntry, timetable_models.SpecialEntry]

EntryDraftBody = Annotated[
    Union[timetable_models.RegularEntryDraft, timetable_models.SpecialEntryDraft],
    Body(discriminator='type')
]


class TimetableAPI:
    """
    A class to encapsulate endpoints for the Timetable.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/timetable",
            tags=["Timetable"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/day",
                self.get_day,
                methods=["GET"],
                response_model=list[timetable_models.ResolvedSession])

        self.router.add_api_route(
                "/week",
                self.get_week,
                methods=["GET"],
                response_model=list[timetable_models.DaySchedule])

        self.router.add_api_route(
                "/next-day",
                self.get_next_day,
                methods=["GET"],
                response_model=list[timetable_models.ClassSchedule])

        self.router.add_api_route(
                "/special",
                self.get_special_entries,
                methods=["GET"],
                response_model=timetable_models.SpecialEntriesOverview)

        self.router.add_api_route(
                "/event-types",
                self.get_event_types,
                methods=["GET"],
                response_model=list[str])

        self.router.add_api_route(
                "/conflicts",
                self.check_conflict,
                methods=["POST"],
                response_model=conflict_models.ConflictResult)

        self.router.add_api_route(
                "/entries",
                self.create_entry,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=StoredEntry)

        self.router.add_api_route(
                "/entries/{entry_id}",
                self.update_entry,
                methods=["PUT"],
                response_model=StoredEntry)

        self.router.add_api_route(
                "/entries/{entry_id}",
                self.delete_entry,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT)

        self.router.add_api_route(
                "/entries/{entry_id}/override",
                self.create_override,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=StoredEntry)

    async def get_day(
        self,
        timetable_service: Annotated[TimetableService, Depends(TimetableService)],
        target_date: Annotated[date, Query(alias="date", description="The day to resolve")],
        class_name: Annotated[Optional[str], Query(description="Optional class filter; 'All' means every class")] = None,
        division_id: Annotated[Optional[UUID], Query(description="Optional division filter")] = None
    ) -> list[Any]:
        """
        Retrieves the sessions effectively scheduled on a day, after special
        sessions have overridden the regular ones.
        """
        filters = timetable_models.ScheduleFilters(class_name=class_name, division_id=division_id)
        return await timetable_service.get_day_for_api(target_date, filters)

    async def get_week(
        self,
        timetable_service: Annotated[TimetableService, Depends(TimetableService)],
        reference_date: Annotated[date, Query(description="Any day inside the wanted week")],
        class_name: Annotated[Optional[str], Query()] = None,
        division_id: Annotated[Optional[UUID], Query()] = None
    ) -> list[Any]:
        """
        Retrieves the seven resolved days of the week containing reference_date.
        """
        filters = timetable_models.ScheduleFilters(class_name=class_name, division_id=division_id)
        return await timetable_service.get_week_for_api(reference_date, filters)

    async def get_next_day(
        self,
        timetable_service: Annotated[TimetableService, Depends(TimetableService)],
        reference_date: Annotated[date, Query(description="The caller's 'today'")]
    ) -> list[Any]:
        """
        Retrieves the day after reference_date, grouped per class.
        """
        return await timetable_service.get_next_day_for_api(reference_date)

    async def get_special_entries(
        self,
        timetable_service: Annotated[TimetableService, Depends(TimetableService)],
        reference_date: Annotated[date, Query(description="The caller's 'today'")]
    ) -> Any:
        return await timetable_service.get_special_entries_for_api(reference_date)

    async def get_event_types(
        self,
        timetable_service: Annotated[TimetableService, Depends(TimetableService)]
    ) -> list[str]:
        return timetable_service.get_event_types_for_api()

    async def check_conflict(
        self,
        request: conflict_models.ConflictCheckRequest,
        timetable_service: Annotated[TimetableService, Depends(TimetableService)]
    ) -> Any:
        """
        Advisory room-conflict check for a candidate session. Never blocks anything.
        """
        return await timetable_service.check_conflict_for_api(request)

    async def create_entry(
        self,
        entry_data: EntryDraftBody,
        timetable_service: Annotated[TimetableService, Depends(TimetableService)],
        confirm_conflict: Annotated[bool, Query(description="Proceed despite a room double-booking")] = False
    ) -> Any:
        """
        Creates a regular or special entry. Responds 409 with the conflict
        details when the room is taken, unless confirm_conflict is set.
        """
        return await timetable_service.create_entry_for_api(entry_data, confirm_conflict)

    async def update_entry(
        self,
        entry_id: UUID,
        entry_data: EntryDraftBody,
        timetable_service: Annotated[TimetableService, Depends(TimetableService)],
        confirm_conflict: Annotated[bool, Query()] = False
    ) -> Any:
        """
        Replaces an entry. The entry itself is ignored by the conflict check.
        """
        return await timetable_service.update_entry_for_api(entry_id, entry_data, confirm_conflict)

    async def delete_entry(
        self,
        entry_id: UUID,
        timetable_service: Annotated[TimetableService, Depends(TimetableService)]
    ):
        await timetable_service.delete_entry(entry_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def create_override(
        self,
        entry_id: UUID,
        override_data: timetable_models.OverrideRequest,
        timetable_service: Annotated[TimetableService, Depends(TimetableService)],
        confirm_conflict: Annotated[bool, Query()] = False
    ) -> Any:
        """
        Replaces one occurrence of a regular entry with a special entry.
        """
        return await timetable_service.create_override_for_api(entry_id, override_data, confirm_conflict)

# Instantiate the class and export its router
timetable_api = TimetableAPI()
router = timetable_api.router
