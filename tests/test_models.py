from datetime import datetime
from decimal import Decimal

from restaurant_manager.models import DishCategory, Order, OrderItem, Reservation, parse_category


def _reservation(start_hour: int, end_hour: int) -> Reservation:
    day = datetime(2026, 3, 10)
    return Reservation(
        id=1,
        client_id=7,
        client_name="Anna",
        phone="555",
        start=day.replace(hour=start_hour),
        end=day.replace(hour=end_hour),
        table_id=1,
    )


def test_covers_includes_start_and_excludes_end():
    r = _reservation(12, 14)
    assert r.covers(r.start)
    assert r.covers(r.start.replace(hour=13, minute=59))
    assert not r.covers(r.end)
    assert not r.covers(r.start.replace(hour=11, minute=59))


def test_overlaps_is_half_open():
    r = _reservation(12, 14)
    day = r.start
    assert r.overlaps(day.replace(hour=13), day.replace(hour=15))
    assert r.overlaps(day.replace(hour=11), day.replace(hour=12, minute=1))
    assert r.overlaps(day.replace(hour=10), day.replace(hour=16))
    assert not r.overlaps(day.replace(hour=14), day.replace(hour=15))
    assert not r.overlaps(day.replace(hour=10), day.replace(hour=12))


def test_order_is_closed_and_item_count():
    order = Order(id=1, client_id=1, table_id=1, created_at=datetime(2026, 3, 10, 12))
    assert not order.is_closed
    order.items.extend([OrderItem(dish_id=1, quantity=2), OrderItem(dish_id=2, quantity=3)])
    assert order.item_count == 5
    order.closed_at = datetime(2026, 3, 10, 13)
    assert order.is_closed
    assert order.total == Decimal("0")


def test_parse_category_accepts_symbolic_names_case_insensitively():
    assert parse_category("Soups") is DishCategory.SOUPS
    assert parse_category("maincourses") is DishCategory.MAIN_COURSES
    assert parse_category("COLD_STARTERS") is DishCategory.COLD_STARTERS
    assert parse_category(DishCategory.DESSERT) is DishCategory.DESSERT


def test_parse_category_falls_back_to_other():
    assert parse_category("Breakfast") is DishCategory.OTHER
    assert parse_category("") is DishCategory.OTHER
    assert parse_category(None) is DishCategory.OTHER
