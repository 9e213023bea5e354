"""
Wall-clock interval helpers used by the shift roster.

Times are zero padded ``"HH:MM"`` strings and are compared as strings;
that ordering matches chronological order only because every value is
validated with :func:`is_valid_time` first.  Intervals are half-open,
``[start, end)``, so a shift ending at ``"10:00"`` does not collide with
one starting at ``"10:00"``.

A range whose end is earlier than its start runs past midnight.  It is
split into ``[start, "24:00")`` on its own date and ``["00:00", end)``
on the following date; ``"24:00"`` sorts after every valid time, so the
same string comparison keeps working on the split segments.
"""
from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Iterable, NamedTuple

TIME_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')
START_OF_DAY = '00:00'
END_OF_DAY = '24:00'


class Segment(NamedTuple):
    day: date
    start: str
    end: str


def is_valid_time(value) -> bool:
    return isinstance(value, str) and bool(TIME_RE.match(value))


def is_empty(start: str, end: str) -> bool:
    return start == end


def overlaps(s1: str, e1: str, s2: str, e2: str) -> bool:
    """Half-open overlap test on same-day ranges."""
    return s1 < e2 and s2 < e1


def segments(day: date, start: str, end: str) -> list[Segment]:
    """Expand a (possibly overnight) range into same-day segments."""
    if is_empty(start, end):
        return []
    if start < end:
        return [Segment(day, start, end)]
    parts = [Segment(day, start, END_OF_DAY)]
    if end > START_OF_DAY:
        parts.append(Segment(day + timedelta(days=1), START_OF_DAY, end))
    return parts


def segments_conflict(a: Iterable[Segment], b: Iterable[Segment]) -> bool:
    b = list(b)
    for x in a:
        for y in b:
            if x.day == y.day and overlaps(x.start, x.end, y.start, y.end):
                return True
    return False


def ranges_conflict(day1: date, start1: str, end1: str, day2: date, start2: str, end2: str) -> bool:
    return segments_conflict(segments(day1, start1, end1), segments(day2, start2, end2))
