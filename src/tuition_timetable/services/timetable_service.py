'''
Timetable Service
'''
from typing import Annotated, Optional
from uuid import UUID
from datetime import date

from fastapi import Depends, HTTPException, status
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from ..core import conflict_detector, schedule_resolver
from ..core.time_windows import next_day
from ..common.exceptions import TimetableValidationError
from ..common.logger import log
from ..models.conflicts import ConflictCheckRequest, ConflictResult
from ..models.enums import EntryType, EventType
from ..models.timetable import (
    ClassSchedule,
    DaySchedule,
    OverrideRequest,
    ResolvedSession,
    ScheduleFilters,
    SpecialEntriesOverview,
    TimetableEntry,
    TimetableEntryDraft,
)
from .entity_store import EntityStoreService


def unprocessable(e: Exception) -> HTTPException:
    """Maps core/model validation failures onto a 422 like FastAPI's own body validation."""
    if isinstance(e, ValidationError):
        detail = jsonable_encoder(e.errors(include_url=False, include_context=False))
    else:
        detail = str(e)
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class TimetableService:
    """
    Service for the resolved timetable views and for writes that must pass the
    soft room-conflict check.
    Every call works on a freshly loaded snapshot; nothing is cached.
    """
    def __init__(
        self,
        store: Annotated[EntityStoreService, Depends(EntityStoreService)]
    ):
        self.store = store

    # --- Conflict Gate ---

    def _require_confirmation(self, result: ConflictResult, confirm_conflict: bool):
        """
        Soft-fail: a double-booking blocks the write with 409 unless the caller
        has explicitly confirmed it.
        """
        if not result.has_conflict:
            return
        if not confirm_conflict:
            log.info(f"Write held back for confirmation: {result.message}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=result.model_dump(mode='json', by_alias=True)
            )
        log.warning(f"Room double-booking confirmed by caller: {result.message}")

    # --- Read Methods (API-Facing) ---

    async def get_day_for_api(
        self,
        target_date: date,
        filters: Optional[ScheduleFilters] = None
    ) -> list[ResolvedSession]:
        log.info(f"Resolving timetable for {target_date.isoformat()} (filters: {filters}).")
        snapshot = await self.store.get_snapshot()
        return schedule_resolver.resolve(target_date, snapshot.entries, filters, snapshot.catalog)

    async def get_week_for_api(
        self,
        reference_date: date,
        filters: Optional[ScheduleFilters] = None
    ) -> list[DaySchedule]:
        log.info(f"Resolving week containing {reference_date.isoformat()}.")
        snapshot = await self.store.get_snapshot()
        return schedule_resolver.resolve_week(reference_date, snapshot.entries, filters, snapshot.catalog)

    async def get_next_day_for_api(self, reference_date: date) -> list[ClassSchedule]:
        """The day after `reference_date`, grouped per class."""
        target_date = next_day(reference_date)
        log.info(f"Resolving next-day schedule for {target_date.isoformat()}.")
        snapshot = await self.store.get_snapshot()
        return schedule_resolver.resolve_by_class(target_date, snapshot.entries, snapshot.catalog)

    async def get_special_entries_for_api(self, reference_date: date) -> SpecialEntriesOverview:
        snapshot = await self.store.get_snapshot()
        return schedule_resolver.partition_special_entries(snapshot.entries, reference_date)

    def get_event_types_for_api(self) -> list[str]:
        """Suggested labels for special sessions. Stored entries may carry any other label too."""
        return EventType.get_all_names()

    async def check_conflict_for_api(self, request: ConflictCheckRequest) -> ConflictResult:
        log.info(f"Checking room conflict for a {request.candidate.type} candidate (exclude: {request.exclude_id}).")
        snapshot = await self.store.get_snapshot()
        try:
            return conflict_detector.has_conflict(
                request.candidate,
                snapshot.entries,
                exclude_id=request.exclude_id,
                reference_date=request.reference_date,
                catalog=snapshot.catalog,
            )
        except TimetableValidationError as e:
            raise unprocessable(e)

    # --- Write Methods (API-Facing) ---

    async def create_entry_for_api(
        self,
        draft: TimetableEntryDraft,
        confirm_conflict: bool = False
    ) -> TimetableEntry:
        log.info(f"Creating {draft.type} entry for class {draft.class_name}.")
        snapshot = await self.store.get_snapshot()
        result = conflict_detector.has_conflict(draft, snapshot.entries, catalog=snapshot.catalog)
        self._require_confirmation(result, confirm_conflict)

        entry = await self.store.create_entry(draft)
        if entry.type == EntryType.SPECIAL.value:
            replaced = schedule_resolver.overridden_by(entry, snapshot.entries)
            if replaced:
                log.info(f"Special entry {entry.id} overrides {len(replaced)} regular session(s) on {entry.specific_date}.")
        return entry

    async def update_entry_for_api(
        self,
        entry_id: UUID,
        draft: TimetableEntryDraft,
        confirm_conflict: bool = False
    ) -> TimetableEntry:
        log.info(f"Updating timetable entry {entry_id}.")
        await self.store.get_entry(entry_id)  # 404 before any conflict work

        snapshot = await self.store.get_snapshot()
        result = conflict_detector.has_conflict(
            draft, snapshot.entries, exclude_id=entry_id, catalog=snapshot.catalog
        )
        self._require_confirmation(result, confirm_conflict)
        return await self.store.update_entry(entry_id, draft)

    async def delete_entry(self, entry_id: UUID) -> bool:
        log.info(f"Deleting timetable entry {entry_id}.")
        return await self.store.delete_entry(entry_id)

    async def create_override_for_api(
        self,
        entry_id: UUID,
        request: OverrideRequest,
        confirm_conflict: bool = False
    ) -> TimetableEntry:
        """
        Replaces one occurrence of a regular entry with a special entry on
        `request.on_date`, e.g. moving tomorrow's class by half an hour.
        """
        log.info(f"Creating override of entry {entry_id} on {request.on_date.isoformat()}.")
        regular = await self.store.get_entry(entry_id)
        try:
            draft = schedule_resolver.build_override(regular, request)
        except (TimetableValidationError, ValidationError) as e:
            log.warning(f"Rejected override of entry {entry_id}: {e}")
            raise unprocessable(e)

        return await self.create_entry_for_api(draft, confirm_conflict)
