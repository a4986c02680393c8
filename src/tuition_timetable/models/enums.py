'''

'''
import enum

# --- Base Enum Class ---
class ListableEnum(str, enum.Enum):
    """A custom Enum base class that can list all member names."""
    @classmethod
    def get_all_names(cls) -> list[str]:
        return [member.value for member in cls]


class EntryType(ListableEnum):
    REGULAR = "Regular"
    SPECIAL = "Special"


class EventType(ListableEnum):
    """
    Well-known labels for special sessions.
    The stored field is free-form text, so these are suggestions, not a constraint.
    """
    CLASS = "class"
    EXAM_REVISION = "exam_revision"
    NIGHT_CLASS = "night_class"
    SPECIAL_CLASS = "special_class"
    REPLACEMENT = "replacement"
    EXTRA_CLASS = "extra_class"
    PTM = "ptm"
    CUSTOM = "custom"


class DayOfWeek(int, enum.Enum):
    """Sunday-based weekday numbering used by the timetable (0 = Sunday)."""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()
