from datetime import date
from types import SimpleNamespace

from spotbnb.services.booking_rules import find_conflict, ranges_overlap, validate_range

TODAY = date(2024, 5, 20)


def stay(start, end):
    return SimpleNamespace(start_date=start, end_date=end)


def test_validate_range_accepts_future_range():
    assert validate_range(date(2024, 6, 1), date(2024, 6, 5), TODAY) == {}


def test_validate_range_allows_start_today():
    assert validate_range(TODAY, date(2024, 5, 21), TODAY) == {}


def test_validate_range_rejects_past_start():
    errors = validate_range(date(2024, 5, 19), date(2024, 5, 25), TODAY)
    assert errors == {"startDate": "startDate cannot be in the past"}


def test_validate_range_rejects_end_on_start():
    errors = validate_range(date(2024, 6, 1), date(2024, 6, 1), TODAY)
    assert errors == {"endDate": "endDate cannot be on or before startDate"}


def test_validate_range_reports_both_fields():
    errors = validate_range(date(2024, 5, 1), date(2024, 4, 28), TODAY)
    assert set(errors) == {"startDate", "endDate"}


def test_start_inside_existing_range_overlaps():
    assert ranges_overlap(date(2024, 6, 4), date(2024, 6, 10), date(2024, 6, 1), date(2024, 6, 5))


def test_range_wrapping_existing_start_overlaps():
    assert ranges_overlap(date(2024, 5, 28), date(2024, 6, 2), date(2024, 6, 1), date(2024, 6, 5))


def test_range_containing_existing_overlaps():
    assert ranges_overlap(date(2024, 5, 28), date(2024, 6, 10), date(2024, 6, 1), date(2024, 6, 5))


def test_same_start_overlaps():
    assert ranges_overlap(date(2024, 6, 1), date(2024, 6, 2), date(2024, 6, 1), date(2024, 6, 5))


def test_back_to_back_after_does_not_overlap():
    assert not ranges_overlap(date(2024, 6, 5), date(2024, 6, 10), date(2024, 6, 1), date(2024, 6, 5))


def test_back_to_back_before_does_not_overlap():
    assert not ranges_overlap(date(2024, 5, 25), date(2024, 6, 1), date(2024, 6, 1), date(2024, 6, 5))


def test_find_conflict_returns_first_clash():
    first = stay(date(2024, 6, 1), date(2024, 6, 5))
    second = stay(date(2024, 6, 7), date(2024, 6, 9))
    assert find_conflict(date(2024, 6, 3), date(2024, 6, 8), [first, second]) is first


def test_find_conflict_none_when_clear():
    existing = [stay(date(2024, 6, 1), date(2024, 6, 5)), stay(date(2024, 6, 10), date(2024, 6, 12))]
    assert find_conflict(date(2024, 6, 5), date(2024, 6, 10), existing) is None
