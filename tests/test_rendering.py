from datetime import datetime
from decimal import Decimal

from restaurant_manager.models import Dish, DishCategory, Order, OrderItem, Reservation, Table
from restaurant_manager.rendering import (
    dish_summary,
    format_order_label,
    format_reservation_label,
    group_dishes_by_category,
    order_summary,
    reservation_summary,
    table_summary,
)

DAY = datetime(2026, 3, 10)


def test_summaries():
    assert table_summary(Table(id=2, location="aisle", seats=2)) == "ID 2 | aisle | Seats: 2"
    dish = Dish(id=1, name="Tea", price=Decimal("50"), category=DishCategory.DRINKS)
    assert dish_summary(dish) == "ID 1 | Tea | Drinks | 50.00"

    r = Reservation(
        id=3, client_id=7, client_name="Anna", phone="555",
        start=DAY.replace(hour=12), end=DAY.replace(hour=14), table_id=1,
    )
    assert reservation_summary(r) == (
        "ID 3 | Client 7 | Table 1 | Anna (555) | 2026-03-10 12:00 - 2026-03-10 14:00 | Comment: empty"
    )


def test_order_summary_and_label():
    order = Order(
        id=5, client_id=7, table_id=1, created_at=DAY.replace(hour=12),
        items=[OrderItem(dish_id=1, quantity=2), OrderItem(dish_id=2, quantity=1)], comment="cash",
    )
    assert order_summary(order) == (
        "ID 5 | Client 7 | Table 1 | Items: 3 | Created: 2026-03-10 12:00 | Open | Comment: cash"
    )
    order.closed_at = DAY.replace(hour=13)
    order.total = Decimal("300")
    label = format_order_label(order).plain
    assert label.startswith("C ID 5")
    assert "Closed" in label and label.endswith("Total: 300.00")


def test_reservation_label_marks_current():
    r = Reservation(
        id=1, client_id=1, client_name="Max", phone="1",
        start=DAY.replace(hour=12), end=DAY.replace(hour=14), table_id=1,
    )
    assert format_reservation_label(r, DAY.replace(hour=13)).plain.startswith("NOW ")
    assert format_reservation_label(r, DAY.replace(hour=14)).plain.startswith("ID 1")


def test_dishes_grouped_by_menu_section():
    dishes = [
        Dish(id=1, name="Cake", price=Decimal("1"), category=DishCategory.DESSERT),
        Dish(id=2, name="Tea", price=Decimal("1"), category=DishCategory.DRINKS),
        Dish(id=3, name="Soup", price=Decimal("1"), category=DishCategory.SOUPS),
        Dish(id=4, name="Coffee", price=Decimal("1"), category=DishCategory.DRINKS),
    ]
    assert [d.id for d in group_dishes_by_category(dishes)] == [2, 4, 3, 1]
