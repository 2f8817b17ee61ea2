import pytest

from conftest import at
from restaurant_manager.errors import ConflictError, NotFoundError, ValidationError
from restaurant_manager.manager import next_id
from restaurant_manager.models import Table


def test_next_id_is_max_plus_one():
    assert next_id([]) == 1
    tables = [Table(id=1, location="a", seats=2), Table(id=3, location="b", seats=2)]
    assert next_id(tables) == 4


def test_ids_are_not_reused_after_gaps(manager):
    manager.add_table("a", 2)
    manager.add_table("b", 2)
    manager.add_table("c", 2)
    manager.delete_table(2)
    assert [t.id for t in manager.tables] == [1, 3]
    assert manager.add_table("d", 2).id == 4


def test_add_table_validates_input(manager):
    with pytest.raises(ValidationError):
        manager.add_table("window", 0)
    with pytest.raises(ValidationError):
        manager.add_table("   ", 4)
    assert manager.tables == []


def test_edit_table_rejected_while_occupied(booked, clock):
    with pytest.raises(ConflictError):
        booked.edit_table(1, "terrace", 6)
    assert booked.tables[0].location == "by the window"

    clock.set(at(14))
    table = booked.edit_table(1, "terrace", 6)
    assert (table.location, table.seats) == ("terrace", 6)


def test_edit_missing_table(manager):
    with pytest.raises(NotFoundError):
        manager.edit_table(9, "x", 2)


def test_delete_table_with_any_reservation_fails(booked, clock):
    clock.set(at(20))
    with pytest.raises(ConflictError):
        booked.delete_table(1)
    assert len(booked.tables) == 1

    booked.cancel_reservation(1)
    booked.delete_table(1)
    assert booked.tables == []


def test_table_info_lists_schedule_and_marks_current(booked):
    booked.add_reservation(1, 102, "Anna", "555", at(15), at(16), "window seat")
    info = booked.table_info(1)
    lines = info.splitlines()
    assert lines[0] == "ID: 1"
    assert "Seats: 4" in lines
    schedule = lines[4:]
    assert "(OCCUPIED NOW)" in schedule[0]
    assert "Max" in schedule[0] and "comment: empty" in schedule[0]
    assert "OCCUPIED" not in schedule[1]
    assert "comment: window seat" in schedule[1]


def test_table_info_without_reservations(manager):
    manager.add_table("bar", 2)
    assert manager.table_info(1).endswith("No reservations.")


def test_seats_given_as_text_are_coerced_or_rejected(manager):
    assert manager.add_table("terrace", "4").seats == 4
    with pytest.raises(ValidationError):
        manager.add_table("terrace", "four")
    with pytest.raises(ValidationError):
        manager.add_table("terrace", None)
    with pytest.raises(ValidationError):
        manager.edit_table(1, "terrace", 2.5)
    assert [t.seats for t in manager.tables] == [4]
