from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, Enum, Index, Integer, PrimaryKeyConstraint, SmallInteger, Text, Time, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
import datetime
import uuid

class Base(DeclarativeBase):
    pass


class Rooms(Base):
    __tablename__ = 'rooms'
    __table_args__ = (
        CheckConstraint('capacity IS NULL OR capacity > 0', name='rooms_capacity_positive'),
        PrimaryKeyConstraint('id', name='rooms_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text)
    capacity: Mapped[Optional[int]] = mapped_column(Integer)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(True), server_default=func.now())


class Subjects(Base):
    __tablename__ = 'subjects'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='subjects_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text)
    class_name: Mapped[Optional[str]] = mapped_column('class', Text)


class Faculty(Base):
    __tablename__ = 'faculty'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='faculty_pkey'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text)


class Divisions(Base):
    __tablename__ = 'divisions'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='divisions_pkey'),
        Index('idx_divisions_class', 'class'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    class_name: Mapped[str] = mapped_column('class', Text)
    name: Mapped[str] = mapped_column(Text)


class TimetableEntries(Base):
    """
    One row per entry. Regular rows carry day_of_week, special rows carry
    specific_date and event_type. References are not foreign keys: an entry
    may outlive the room, subject or faculty it points to.
    """
    __tablename__ = 'timetable_entries'
    __table_args__ = (
        CheckConstraint(
            "(entry_type = 'Regular' AND day_of_week IS NOT NULL AND specific_date IS NULL) OR "
            "(entry_type = 'Special' AND specific_date IS NOT NULL AND day_of_week IS NULL)",
            name='one_schedule_per_entry_type'
        ),
        CheckConstraint('day_of_week IS NULL OR (day_of_week >= 0 AND day_of_week <= 6)', name='valid_day_of_week'),
        CheckConstraint('start_time < end_time', name='start_before_end'),
        PrimaryKeyConstraint('id', name='timetable_entries_pkey'),
        Index('idx_entries_day_of_week', 'day_of_week'),
        Index('idx_entries_specific_date', 'specific_date'),
        Index('idx_entries_room_id', 'room_id'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    entry_type: Mapped[str] = mapped_column(Enum('Regular', 'Special', name='entry_type_enum'))
    class_name: Mapped[str] = mapped_column('class', Text)
    subject_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    faculty_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    start_time: Mapped[datetime.time] = mapped_column(Time)
    end_time: Mapped[datetime.time] = mapped_column(Time)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(True), server_default=func.now())
    division_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    room_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid)
    day_of_week: Mapped[Optional[int]] = mapped_column(SmallInteger)
    specific_date: Mapped[Optional[datetime.date]] = mapped_column(Date)
    event_type: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)
