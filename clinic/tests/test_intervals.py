from datetime import date

import pytest

from clinic.services import intervals

D = date(2024, 6, 3)
NEXT = date(2024, 6, 4)


@pytest.mark.parametrize('value,ok', [
    ('00:00', True), ('09:30', True), ('23:59', True),
    ('24:00', False), ('9:30', False), ('12:60', False), ('', False), (None, False),
])
def test_is_valid_time(value, ok):
    assert intervals.is_valid_time(value) is ok


def test_touching_ranges_do_not_overlap():
    assert not intervals.overlaps('09:00', '10:00', '10:00', '11:00')
    assert not intervals.overlaps('10:00', '11:00', '09:00', '10:00')


def test_partial_and_nested_ranges_overlap():
    assert intervals.overlaps('09:00', '10:00', '09:30', '10:30')
    assert intervals.overlaps('08:00', '12:00', '09:00', '10:00')


def test_zero_length_range_has_no_segments():
    assert intervals.segments(D, '09:00', '09:00') == []
    assert not intervals.ranges_conflict(D, '09:00', '09:00', D, '08:00', '10:00')


def test_overnight_range_is_split_at_midnight():
    assert intervals.segments(D, '20:00', '08:00') == [
        intervals.Segment(D, '20:00', '24:00'),
        intervals.Segment(NEXT, '00:00', '08:00'),
    ]


def test_range_ending_at_midnight_stays_on_its_day():
    assert intervals.segments(D, '20:00', '00:00') == [intervals.Segment(D, '20:00', '24:00')]


def test_overnight_conflicts_with_next_morning_only_before_its_end():
    assert intervals.ranges_conflict(D, '20:00', '08:00', NEXT, '06:00', '07:00')
    assert not intervals.ranges_conflict(D, '20:00', '08:00', NEXT, '08:00', '12:00')
    assert intervals.ranges_conflict(D, '20:00', '08:00', D, '21:00', '22:00')
    assert not intervals.ranges_conflict(D, '20:00', '08:00', D, '12:00', '20:00')
