"""
Overlap Detection

Interval comparisons shared by appointment booking and time off management.
Every interval is half-open, [start, end): touching endpoints never conflict,
so back-to-back bookings and adjacent time off periods are allowed.
"""

from datetime import datetime
from typing import Any, Iterable, List, Optional


def intervals_overlap(
    start_a: datetime,
    end_a: datetime,
    start_b: datetime,
    end_b: datetime
) -> bool:
    """
    Returns True when [start_a, end_a) and [start_b, end_b) share any instant.

    Args:
        start_a, end_a: first interval
        start_b, end_b: second interval

    Returns:
        bool: start_a < end_b and end_a > start_b
    """
    return start_a < end_b and end_a > start_b


def find_conflicts(
    records: Iterable[Any],
    start: datetime,
    end: datetime,
    exclude_id: Optional[int] = None
) -> List[Any]:
    """
    Filters records whose [start_datetime, end_datetime) overlaps [start, end).

    Args:
        records: objects exposing id, start_datetime and end_datetime
        start: start of the requested interval
        end: end of the requested interval
        exclude_id: id of a record to ignore (the record being edited)

    Returns:
        list: conflicting records, in input order
    """
    return [
        record for record in records
        if (exclude_id is None or record.id != exclude_id)
        and intervals_overlap(record.start_datetime, record.end_datetime, start, end)
    ]


def has_conflict(
    records: Iterable[Any],
    start: datetime,
    end: datetime,
    exclude_id: Optional[int] = None
) -> bool:
    return bool(find_conflicts(records, start, end, exclude_id))
