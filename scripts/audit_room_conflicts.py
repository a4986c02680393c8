'''
Scans the upcoming days of the timetable store and prints every room
double-booking, i.e. every soft conflict that was confirmed (or slipped in
between a check and a write).

Usage: python scripts/audit_room_conflicts.py [days] [YYYY-MM-DD]
'''
import asyncio
import sys
from datetime import date, timedelta
from itertools import combinations
from pathlib import Path

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# --- Path Setup ---
# This file is assumed to be in <project_root>/scripts/audit_room_conflicts.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.tuition_timetable.common.config import settings
from src.tuition_timetable.core.occupancy import occupancy
from src.tuition_timetable.core.time_windows import windows_overlap
from src.tuition_timetable.services.entity_store import EntityStoreService


async def audit_room_conflicts(days: int, start: date) -> int:
    db_url = settings.database_url
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://")

    print("Connecting to database...")
    engine = create_async_engine(db_url)
    async_session = async_sessionmaker(engine, class_=AsyncSession)

    found = 0
    try:
        async with async_session() as session:
            snapshot = await EntityStoreService(db=session).get_snapshot()

        print(f"--- Auditing {len(snapshot.rooms)} rooms from {start} for {days} day(s) ---")
        for offset in range(days):
            current = start + timedelta(days=offset)
            for room_day in occupancy(current, snapshot.rooms, snapshot.entries, snapshot.catalog):
                for a, b in combinations(room_day.intervals, 2):
                    if windows_overlap(a, b):
                        found += 1
                        print(
                            f"{current} {room_day.room.name}: "
                            f"{a.start_time:%H:%M}-{a.end_time:%H:%M} {a.subject_name or a.subject_id} ({a.class_name}) "
                            f"overlaps {b.start_time:%H:%M}-{b.end_time:%H:%M} {b.subject_name or b.subject_id} ({b.class_name})"
                        )
    finally:
        await engine.dispose()

    if found == 0:
        print("✅ No room double-bookings found.")
    else:
        print(f"⚠️ Found {found} room double-booking(s).")
    return found


if __name__ == "__main__":
    days = int(sys.argv[1]) if len(sys.argv) > 1 else 14
    start = date.fromisoformat(sys.argv[2]) if len(sys.argv) > 2 else date.today()
    asyncio.run(audit_room_conflicts(days, start))
