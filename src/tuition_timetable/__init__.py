'''
Timetable resolution and room-conflict detection for a tuition center.

The pure scheduling core lives in `core/`; `services/` and `api/` wrap it
around the entity store and expose it over HTTP (see `main.app`).
'''
from .core.schedule_resolver import resolve, resolve_week, resolve_by_class
from .core.conflict_detector import has_conflict, room_availability
from .core.occupancy import occupancy, free_rooms, occupancy_grid

__all__ = [
    "resolve",
    "resolve_week",
    "resolve_by_class",
    "has_conflict",
    "room_availability",
    "occupancy",
    "free_rooms",
    "occupancy_grid",
]
