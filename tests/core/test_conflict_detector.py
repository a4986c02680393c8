'''
Tests for the advisory room-conflict detector.
'''
import pytest
from uuid import uuid4

from src.tuition_timetable.common.exceptions import TimetableValidationError
from src.tuition_timetable.core.conflict_detector import has_conflict, room_availability
from src.tuition_timetable.models.catalog import Room, ScheduleCatalog, Subject
from src.tuition_timetable.models.enums import DayOfWeek
from tests.builders import regular, special, t
from tests.constants import (
    TEST_ROOM_A_ID,
    TEST_ROOM_B_ID,
    TEST_ROOM_C_ID,
    TEST_SUBJECT_MATH_ID,
    TEST_WEDNESDAY,
    TEST_THURSDAY,
    TEST_NEXT_WEDNESDAY,
)

WED = DayOfWeek.WEDNESDAY


@pytest.fixture
def existing():
    """8th Math, Wednesdays 09:00-10:00, Room A."""
    return regular(WED, "09:00", "10:00", room_id=TEST_ROOM_A_ID)


@pytest.fixture
def catalog():
    return ScheduleCatalog(
        rooms=[
            Room(id=TEST_ROOM_A_ID, name="Room A"),
            Room(id=TEST_ROOM_B_ID, name="Room B"),
            Room(id=TEST_ROOM_C_ID, name="Room C"),
        ],
        subjects=[Subject(id=TEST_SUBJECT_MATH_ID, name="Math", class_name="8th")],
    )


class TestWeeklyConflicts:

    def test_overlap_in_same_room(self, existing, catalog):
        candidate = regular(WED, "09:30", "10:30", room_id=TEST_ROOM_A_ID, class_name="9th", draft=True)

        result = has_conflict(candidate, [existing], catalog=catalog)

        assert result.has_conflict is True
        assert [c.id for c in result.conflicts] == [existing.id]
        assert result.first.session_date is None
        assert result.message == "Room A is already booked on Wednesdays at 09:00-10:00 (Math, 8th)."
        print(result.message)

    def test_back_to_back_is_free(self, existing):
        candidate = regular(WED, "10:00", "11:00", room_id=TEST_ROOM_A_ID, draft=True)
        result = has_conflict(candidate, [existing])
        assert result.has_conflict is False
        assert result.conflicts == []

    def test_other_weekday_is_free(self, existing):
        candidate = regular(DayOfWeek.THURSDAY, "09:00", "10:00", room_id=TEST_ROOM_A_ID, draft=True)
        assert has_conflict(candidate, [existing]).has_conflict is False

    def test_specials_are_not_weekly_clashes(self, existing):
        one_off = special(TEST_WEDNESDAY, "09:00", "10:00", room_id=TEST_ROOM_B_ID)
        candidate = regular(WED, "09:00", "10:00", room_id=TEST_ROOM_B_ID, draft=True)
        assert has_conflict(candidate, [existing, one_off]).has_conflict is False

    def test_no_room_never_conflicts(self, existing):
        candidate = regular(WED, "09:00", "10:00", room_id=None, draft=True)
        result = has_conflict(candidate, [existing])
        assert result.has_conflict is False
        assert result.message == "No room assigned."

    def test_several_clashes_are_counted(self, existing, catalog):
        second = regular(WED, "09:30", "10:30", room_id=TEST_ROOM_A_ID, class_name="9th")
        candidate = regular(WED, "09:00", "11:00", room_id=TEST_ROOM_A_ID, class_name="10th", draft=True)

        result = has_conflict(candidate, [existing, second], catalog=catalog)

        assert len(result.conflicts) == 2
        assert result.message.endswith("and 1 more.")

    def test_unknown_room_name(self, existing):
        candidate = regular(WED, "09:00", "10:00", room_id=TEST_ROOM_A_ID, draft=True)
        result = has_conflict(candidate, [existing])
        assert result.message.startswith("The room is already booked")


class TestEditingExistingEntry:

    def test_entry_does_not_conflict_with_itself(self, existing):
        assert has_conflict(existing, [existing]).has_conflict is False

    def test_exclude_id_skips_entry_being_edited(self, existing):
        edited = regular(WED, "09:30", "10:30", room_id=TEST_ROOM_A_ID, draft=True)
        assert has_conflict(edited, [existing], exclude_id=existing.id).has_conflict is False
        assert has_conflict(edited, [existing]).has_conflict is True


class TestDatedConflicts:

    def test_special_clashes_with_regular_of_other_class(self, existing):
        candidate = special(TEST_NEXT_WEDNESDAY, "09:30", "10:30", room_id=TEST_ROOM_A_ID, class_name="9th", draft=True)

        result = has_conflict(candidate, [existing])

        assert result.has_conflict is True
        assert result.first.session_date == TEST_NEXT_WEDNESDAY
        assert "2024-06-19" in result.message

    def test_special_replacing_the_regular_is_not_a_clash(self, existing):
        """The special overrides the regular it overlaps, so the room is free for it."""
        candidate = special(TEST_NEXT_WEDNESDAY, "09:00", "10:00", room_id=TEST_ROOM_A_ID, draft=True)
        assert has_conflict(candidate, [existing]).has_conflict is False

    def test_overridden_regular_does_not_block(self, existing):
        """Once the 8th's session moved to Room B, Room A is free that day."""
        moved = special(TEST_NEXT_WEDNESDAY, "09:00", "10:00", room_id=TEST_ROOM_B_ID)
        candidate = special(TEST_NEXT_WEDNESDAY, "09:00", "10:00", room_id=TEST_ROOM_A_ID, class_name="9th", draft=True)

        assert has_conflict(candidate, [existing, moved]).has_conflict is False
        # on any other Wednesday the room is still taken
        other = candidate.model_copy(update={'specific_date': TEST_WEDNESDAY})
        assert has_conflict(other, [existing, moved]).has_conflict is True

    def test_two_specials_in_same_room(self):
        booked = special(TEST_THURSDAY, "14:00", "15:00", room_id=TEST_ROOM_C_ID, class_name="10th")
        candidate = special(TEST_THURSDAY, "14:30", "14:45", room_id=TEST_ROOM_C_ID, class_name="9th", draft=True)
        assert has_conflict(candidate, [booked]).has_conflict is True

    def test_regular_on_reference_date(self, existing):
        moved = special(TEST_NEXT_WEDNESDAY, "09:00", "10:00", room_id=TEST_ROOM_B_ID)
        candidate = regular(WED, "09:00", "10:00", room_id=TEST_ROOM_A_ID, class_name="9th", draft=True)

        # weekly check ignores the one-off move
        assert has_conflict(candidate, [existing, moved]).has_conflict is True
        # on that date Room A is free
        result = has_conflict(candidate, [existing, moved], reference_date=TEST_NEXT_WEDNESDAY)
        assert result.has_conflict is False

    def test_regular_candidate_overridden_on_reference_date(self):
        """A regular candidate replaced by its own class's special cannot clash that day."""
        ptm = special(TEST_NEXT_WEDNESDAY, "09:00", "10:00", room_id=TEST_ROOM_B_ID, class_name="All")
        booked = special(TEST_NEXT_WEDNESDAY, "09:00", "10:00", room_id=TEST_ROOM_A_ID, class_name="All")
        candidate = regular(WED, "09:00", "10:00", room_id=TEST_ROOM_A_ID, draft=True)

        result = has_conflict(candidate, [ptm, booked], reference_date=TEST_NEXT_WEDNESDAY)

        assert result.has_conflict is False

    def test_wildcard_candidate_not_overridden_by_class_special(self):
        """A 9th-grade special in the hall does not cancel the school assembly, so they clash."""
        revision = special(TEST_NEXT_WEDNESDAY, "09:00", "10:00", room_id=TEST_ROOM_A_ID, class_name="9th")
        assembly = regular(WED, "09:00", "10:00", room_id=TEST_ROOM_A_ID, class_name="All", draft=True)

        result = has_conflict(assembly, [revision], reference_date=TEST_NEXT_WEDNESDAY)

        assert result.has_conflict is True
        assert result.first.entry.id == revision.id

    def test_reference_date_on_wrong_weekday(self, existing):
        candidate = regular(WED, "09:00", "10:00", room_id=TEST_ROOM_A_ID, draft=True)
        with pytest.raises(TimetableValidationError):
            has_conflict(candidate, [existing], reference_date=TEST_THURSDAY)


class TestConflictProperties:

    @pytest.mark.parametrize("a_window, b_window", [
        (("09:00", "10:00"), ("09:30", "10:30")),
        (("09:00", "12:00"), ("10:00", "10:15")),
        (("09:00", "10:00"), ("10:00", "11:00")),
    ])
    def test_symmetry(self, a_window, b_window):
        a = regular(WED, *a_window, room_id=TEST_ROOM_A_ID, class_name="8th")
        b = regular(WED, *b_window, room_id=TEST_ROOM_A_ID, class_name="9th")
        assert has_conflict(a, [a, b]).has_conflict == has_conflict(b, [a, b]).has_conflict

    def test_symmetry_for_specials(self):
        a = special(TEST_THURSDAY, "14:00", "15:00", room_id=TEST_ROOM_C_ID, class_name="8th")
        b = special(TEST_THURSDAY, "14:30", "16:00", room_id=TEST_ROOM_C_ID, class_name="9th")
        assert has_conflict(a, [a, b]).has_conflict is True
        assert has_conflict(b, [a, b]).has_conflict is True

    @pytest.mark.parametrize("room_a, room_b", [
        (TEST_ROOM_A_ID, TEST_ROOM_B_ID),
        (TEST_ROOM_A_ID, None),
        (None, None),
    ])
    def test_no_false_positive_across_rooms(self, room_a, room_b):
        a = regular(WED, "09:00", "10:00", room_id=room_a, class_name="8th")
        b = regular(WED, "09:00", "10:00", room_id=room_b, class_name="9th")
        assert has_conflict(a, [a, b]).has_conflict is False
        assert has_conflict(b, [a, b]).has_conflict is False

        c = special(TEST_WEDNESDAY, "09:00", "10:00", room_id=room_b, class_name="10th")
        # c shares a room with b only when b has one
        assert has_conflict(c, [a, b, c]).has_conflict is (room_b is not None)


class TestRoomAvailability:

    def test_flags_every_room(self, existing, catalog):
        candidate = regular(WED, "09:30", "10:30", room_id=None, class_name="9th", draft=True)

        availability = room_availability(candidate, catalog.rooms, [existing], catalog=catalog)

        assert [a.room.name for a in availability] == ["Room A", "Room B", "Room C"]
        assert [a.has_conflict for a in availability] == [True, False, False]
        assert availability[0].conflicts[0].id == existing.id

    def test_edited_entry_frees_its_own_room(self, existing, catalog):
        edited = existing.model_copy(update={'start_time': t("09:30"), 'end_time': t("10:30")})
        availability = room_availability(edited, catalog.rooms, [existing], exclude_id=existing.id)
        assert not any(a.has_conflict for a in availability)

    def test_unknown_dangling_room_in_entries(self, catalog):
        orphan = regular(WED, "09:00", "10:00", room_id=uuid4())
        candidate = regular(WED, "09:00", "10:00", class_name="9th", draft=True)
        availability = room_availability(candidate, catalog.rooms, [orphan])
        assert not any(a.has_conflict for a in availability)
