from itertools import combinations

import pytest

from conftest import at
from restaurant_manager.errors import ConflictError, NotFoundError, ValidationError


def _assert_no_overlaps(manager):
    for a, b in combinations(manager.reservations, 2):
        if a.table_id == b.table_id:
            assert not a.overlaps(b.start, b.end)


def test_overlapping_reservation_rejected_touching_accepted(booked):
    with pytest.raises(ConflictError):
        booked.add_reservation(1, 102, "Anna", "555", at(13), at(15))
    c = booked.add_reservation(1, 102, "Anna", "555", at(14), at(15))
    assert c.id == 2
    _assert_no_overlaps(booked)


def test_same_interval_on_another_table_is_fine(booked):
    booked.add_table("aisle", 2)
    r = booked.add_reservation(2, 102, "Anna", "555", at(12), at(14))
    assert r.table_id == 2


def test_add_reservation_validation(booked):
    with pytest.raises(NotFoundError):
        booked.add_reservation(9, 102, "Anna", "555", at(15), at(16))
    with pytest.raises(ValidationError):
        booked.add_reservation(1, 102, "Anna", "555", at(16), at(16))
    with pytest.raises(ValidationError):
        booked.add_reservation(1, 102, "", "555", at(15), at(16))
    with pytest.raises(ValidationError):
        booked.add_reservation(1, 102, "Anna", " ", at(15), at(16))
    assert len(booked.reservations) == 1


def test_edit_reservation_excludes_itself(booked):
    r = booked.edit_reservation(1, at(11), at(14, 30), comment="moved")
    assert (r.start, r.end, r.comment) == (at(11), at(14, 30), "moved")


def test_edit_reservation_rejects_overlap_with_others(booked):
    booked.add_reservation(1, 102, "Anna", "555", at(15), at(16))
    with pytest.raises(ConflictError):
        booked.edit_reservation(1, at(12), at(15, 30))
    r = booked.find_reservation(1)
    assert (r.start, r.end) == (at(12), at(14))
    with pytest.raises(ValidationError):
        booked.edit_reservation(1, at(14), at(12))


def test_extend_reservation_rules(booked):
    booked.add_reservation(1, 102, "Anna", "555", at(14), at(15))
    with pytest.raises(ConflictError):
        booked.extend_reservation(1, at(16))
    with pytest.raises(ValidationError):
        booked.extend_reservation(1, at(14))
    assert booked.find_reservation(1).end == at(14)

    extended = booked.extend_reservation(2, at(17))
    assert extended.end == at(17)
    _assert_no_overlaps(booked)


def test_extend_only_checks_added_window(booked):
    # Craft an already-overlapping record to show the check starts at the old end.
    booked.add_reservation(1, 102, "Anna", "555", at(15), at(16))
    booked.reservations[1].start = at(11)
    booked.reservations[1].end = at(12, 30)
    extended = booked.extend_reservation(1, at(14, 30))
    assert extended.end == at(14, 30)


def test_cancel_reservation(booked):
    booked.cancel_reservation(1)
    assert booked.reservations == []
    with pytest.raises(NotFoundError):
        booked.cancel_reservation(1)


def test_find_reservations_by_name_or_phone(booked):
    booked.add_reservation(1, 102, "Anna Petrova", "5745552377", at(15), at(16))
    assert [r.id for r in booked.find_reservations("anna")] == [2]
    assert [r.id for r in booked.find_reservations("MAX")] == [1]
    assert [r.id for r in booked.find_reservations("555")] == [1, 2]
    assert booked.find_reservations("  ") == []
    assert booked.find_reservations("nobody") == []
