"""
This file contains custom, application-specific exceptions.
"""

class TimetableValidationError(ValueError):
    """Raised when scheduling arguments are inconsistent (e.g. a date on the wrong weekday)."""
    pass
