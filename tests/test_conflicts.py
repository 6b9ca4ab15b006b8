"""Tests for the schedule conflict-detection engine."""

from __future__ import annotations

from decimal import Decimal

from schoolsched.domain.models import ConflictType, Schedule
from schoolsched.services.conflicts import (
    check_batch,
    detect_conflicts,
    has_common_days,
    is_time_overlapping,
    normalize_id,
    normalize_time,
)


def _slot(**overrides) -> dict:
    defaults = dict(
        id="1",
        room_id=5,
        teacher_id=12,
        section_id="G7-A",
        days_of_week=[1, 3],
        start_time="08:00",
        end_time="09:00",
        school_year="2024-2025",
    )
    defaults.update(overrides)
    return defaults


def _types(conflicts) -> list[str]:
    return [c.type for c in conflicts]


# ---------------------------------------------------------------------------
# Normalisation helpers
# ---------------------------------------------------------------------------


def test_normalize_id_treats_numbers_and_strings_alike():
    assert normalize_id(7) == "7"
    assert normalize_id("7") == "7"
    assert normalize_id(7.0) == "7"
    assert normalize_id(" 7 ") == "7"
    assert normalize_id(None) == ""


def test_normalize_time_drops_seconds():
    assert normalize_time("08:00:00") == "08:00"
    assert normalize_time("08:00") == "08:00"


def test_normalize_time_returns_degenerate_input_unchanged():
    assert normalize_time("") == ""
    assert normalize_time("0800") == "0800"
    assert normalize_time(None) is None


# ---------------------------------------------------------------------------
# Interval overlap and day intersection
# ---------------------------------------------------------------------------


def test_partial_overlap():
    assert is_time_overlapping("08:00", "09:00", "08:30", "09:30")


def test_containment_overlaps():
    assert is_time_overlapping("08:00", "12:00", "09:00", "10:00")


def test_exact_boundary_no_overlap():
    """One class ending exactly when the other starts is not an overlap."""
    assert not is_time_overlapping("08:00", "09:00", "09:00", "10:00")
    assert not is_time_overlapping("09:00", "10:00", "08:00", "09:00")


def test_seconds_are_ignored_on_both_sides():
    assert is_time_overlapping("08:00", "09:00", "08:59:59", "10:00")
    assert not is_time_overlapping("08:00:00", "09:00:00", "09:00:30", "10:00")


def test_unreadable_times_never_overlap():
    assert not is_time_overlapping("", "09:00", "08:00", "09:00")
    assert not is_time_overlapping("abc", "09:00", "08:00", "09:00")
    assert not is_time_overlapping(None, "09:00", "08:00", "09:00")


def test_has_common_days():
    assert has_common_days([1, 3], [3, 5])
    assert not has_common_days([1, 3], [2, 4])
    assert not has_common_days([], [1])
    assert not has_common_days(None, [1])
    assert not has_common_days(5, [5])


# ---------------------------------------------------------------------------
# detect_conflicts
# ---------------------------------------------------------------------------


def test_example_room_and_section_conflict():
    """Same room and section, different teacher, overlapping on Wednesday 08:30-09:00."""
    candidate = _slot(id=None)
    existing = [
        _slot(id=1, teacher_id=9, days_of_week=[3, 5], start_time="08:30", end_time="09:30")
    ]

    conflicts = detect_conflicts(candidate, existing)

    assert _types(conflicts) == [ConflictType.ROOM, ConflictType.SECTION]
    assert conflicts[0].message == (
        "Room 5 is already scheduled on Wed at 08:30 - 09:00 (2024-2025)"
    )
    assert conflicts[1].message == (
        "Section G7-A is already scheduled on Wed at 08:30 - 09:00 (2024-2025)"
    )
    assert conflicts[0].conflicting_schedule is existing[0]


def test_all_three_dimensions_in_fixed_order():
    conflicts = detect_conflicts(_slot(id=None), [_slot()])
    assert _types(conflicts) == ["room", "teacher", "section"]


def test_no_shared_resource_no_conflict():
    """Overlapping time alone is not a conflict when no resource is shared."""
    existing = [_slot(room_id=6, teacher_id=13, section_id="G7-B")]
    assert detect_conflicts(_slot(id=None), existing) == []


def test_different_school_year_never_conflicts():
    existing = [_slot(school_year="2025-2026")]
    assert detect_conflicts(_slot(id=None), existing) == []


def test_school_year_compared_after_trimming():
    existing = [_slot(school_year="  2024-2025 ")]
    assert len(detect_conflicts(_slot(id=None), existing)) == 3


def test_disjoint_days_never_conflict():
    existing = [_slot(days_of_week=[0, 2, 4, 6])]
    assert detect_conflicts(_slot(id=None), existing) == []


def test_touching_intervals_do_not_conflict():
    existing = [_slot(start_time="09:00", end_time="10:00")]
    assert detect_conflicts(_slot(id=None), existing) == []


def test_days_in_message_are_the_shared_days_sorted():
    candidate = _slot(id=None, days_of_week=[5, 1, 3])
    existing = [_slot(days_of_week=[3, 1], teacher_id=99, section_id="X")]
    [conflict] = detect_conflicts(candidate, existing)
    assert "on Mon, Wed at 08:00 - 09:00" in conflict.message


def test_exclude_id_skips_the_record_being_edited():
    existing = [_slot(id="1"), _slot(id="2", room_id=6, teacher_id=13, section_id="X")]
    assert detect_conflicts(_slot(), existing, exclude_id="1") == []


def test_exclude_id_matches_numeric_and_string_ids():
    assert detect_conflicts(_slot(), [_slot(id="1")], exclude_id=1) == []


def test_exclude_id_only_skips_that_record():
    existing = [_slot(id="1"), _slot(id="2")]
    conflicts = detect_conflicts(_slot(), existing, exclude_id="1")
    assert len(conflicts) == 3
    assert all(c.conflicting_schedule["id"] == "2" for c in conflicts)


def test_results_follow_existing_order():
    existing = [
        _slot(id="a", teacher_id=99, section_id="X"),
        _slot(id="b", room_id=99, section_id="X"),
    ]
    conflicts = detect_conflicts(_slot(id=None), existing)
    assert [(c.conflicting_schedule["id"], c.type) for c in conflicts] == [
        ("a", "room"),
        ("b", "teacher"),
    ]


def test_format_tolerance():
    """Seconds and numeric-vs-string ids do not change the result."""
    plain = detect_conflicts(_slot(id=None), [_slot()])
    mixed = detect_conflicts(
        _slot(
            id=None,
            room_id="5",
            teacher_id="12",
            start_time="08:00:00",
            end_time="09:00:00",
        ),
        [_slot(room_id=5.0, start_time="08:00:00", end_time="09:00:00")],
    )
    assert [(c.type, c.message) for c in plain] == [(c.type, c.message) for c in mixed]


def test_idempotent():
    existing = [_slot(), _slot(id="2", days_of_week=[3], start_time="08:45")]
    first = detect_conflicts(_slot(id=None), existing)
    second = detect_conflicts(_slot(id=None), existing)
    assert first == second
    assert existing[0]["days_of_week"] == [1, 3]


def test_accepts_models():
    stored = Schedule(**_slot())
    conflicts = detect_conflicts(_slot(id=None, room_id="5"), [stored])
    assert _types(conflicts) == ["room", "teacher", "section"]
    assert conflicts[0].conflicting_schedule is stored


# ---------------------------------------------------------------------------
# Permissive handling of malformed input
# ---------------------------------------------------------------------------


def test_empty_or_missing_existing_list():
    assert detect_conflicts(_slot(), []) == []
    assert detect_conflicts(_slot(), None) == []


def test_missing_days_count_as_empty():
    existing = [_slot()]
    del existing[0]["days_of_week"]
    assert detect_conflicts(_slot(id=None), existing) == []
    assert detect_conflicts(_slot(id=None, days_of_week=None), [_slot()]) == []


def test_unreadable_fields_degrade_to_no_conflict():
    assert detect_conflicts(_slot(school_year=None), [_slot()]) == []
    assert detect_conflicts(_slot(start_time="8am"), [_slot()]) == []
    assert detect_conflicts(_slot(), [None, 42, "junk"]) == []
    assert detect_conflicts(_slot(), 5) == []


def test_non_integral_days_are_ignored():
    """Infinite or fractional day values match nothing and never raise."""
    wednesday = [_slot(days_of_week=[3])]
    assert detect_conflicts(_slot(days_of_week=[float("inf"), 1]), wednesday) == []
    assert detect_conflicts(_slot(days_of_week=[3.7]), wednesday) == []
    assert detect_conflicts(_slot(days_of_week=[True]), [_slot(days_of_week=[1])]) == []

    for day in (Decimal("Infinity"), Decimal("NaN"), float("nan")):
        assert detect_conflicts(_slot(id=None), [_slot(days_of_week=[day])]) == []


def test_integral_float_and_decimal_days_still_match():
    conflicts = detect_conflicts(
        _slot(id=None, days_of_week=[3.0]), [_slot(days_of_week=[Decimal(3)])]
    )
    assert _types(conflicts) == ["room", "teacher", "section"]
    assert "on Wed at" in conflicts[0].message


def test_out_of_range_shared_days_shown_as_numbers():
    conflicts = detect_conflicts(
        _slot(id=None, days_of_week=[9]), [_slot(days_of_week=[9])]
    )
    assert conflicts[0].message == (
        "Room 5 is already scheduled on 9 at 08:00 - 09:00 (2024-2025)"
    )


def test_missing_ids_do_not_match_each_other():
    candidate = _slot(id=None, room_id=None)
    conflicts = detect_conflicts(candidate, [_slot(room_id=None)])
    assert _types(conflicts) == ["teacher", "section"]


# ---------------------------------------------------------------------------
# check_batch
# ---------------------------------------------------------------------------


def test_check_batch_compares_candidates_with_each_other():
    candidates = [
        _slot(id="n1"),
        _slot(id="n2", room_id=6, teacher_id=13, start_time="08:30", end_time="09:30"),
    ]
    found = check_batch(candidates, [])
    assert [(index, c.type) for index, c in found] == [(1, "section")]
    assert found[0][1].conflicting_schedule["id"] == "n1"


def test_check_batch_against_existing():
    found = check_batch([_slot(id="n1", teacher_id=77, section_id="Z")], [_slot()])
    assert [(index, c.type) for index, c in found] == [(0, "room")]
