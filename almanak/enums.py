from enum import Enum


class DateComparison(Enum):
    BEFORE = "before"
    AFTER = "after"
    EXACT = "exact"
    TODAY = "today"
    ALL = "all"


class RenderMode(Enum):
    # Row format written to the events file
    PERSIST = "persist"
    # Human readable, used when listing
    DISPLAY = "display"
