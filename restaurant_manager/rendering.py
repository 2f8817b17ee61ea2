"""Display summaries and rich-text helpers."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from rich.text import Text

from restaurant_manager.config import DATETIME_FORMAT
from restaurant_manager.models import Dish, DishCategory, Order, Reservation, Table


def format_datetime(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime(DATETIME_FORMAT)


def format_money(value: Decimal) -> str:
    return f"{value:.2f}"


def _comment_or_empty(comment: str) -> str:
    return comment.strip() or "empty"


def table_summary(table: Table) -> str:
    return f"ID {table.id} | {table.location} | Seats: {table.seats}"


def reservation_summary(reservation: Reservation) -> str:
    return (
        f"ID {reservation.id} | Client {reservation.client_id} | Table {reservation.table_id}"
        f" | {reservation.client_name} ({reservation.phone})"
        f" | {format_datetime(reservation.start)} - {format_datetime(reservation.end)}"
        f" | Comment: {_comment_or_empty(reservation.comment)}"
    )


def dish_summary(dish: Dish) -> str:
    return f"ID {dish.id} | {dish.name} | {dish.category.value} | {format_money(dish.price)}"


def order_summary(order: Order) -> str:
    status = "Closed" if order.is_closed else "Open"
    return (
        f"ID {order.id} | Client {order.client_id} | Table {order.table_id}"
        f" | Items: {order.item_count} | Created: {format_datetime(order.created_at)}"
        f" | {status} | Comment: {_comment_or_empty(order.comment)}"
    )


def status_style(is_closed: bool) -> str:
    """Return a consistent badge style for order state tags."""
    if is_closed:
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def format_order_label(order: Order) -> Text:
    """Render an order summary with a coloured open/closed tag."""
    text = Text()
    tag = "C" if order.is_closed else "O"
    text.append(tag, style=status_style(order.is_closed))
    text.append(f" {order_summary(order)}")
    if order.is_closed:
        text.append(f" | Total: {format_money(order.total)}", style="bold")
    return text


def format_reservation_label(reservation: Reservation, now: datetime) -> Text:
    """Render a reservation, highlighting one that covers ``now``."""
    text = Text()
    if reservation.covers(now):
        text.append("NOW", style="bold #ffffff on #b23a48")
        text.append(" ")
    text.append(reservation_summary(reservation))
    return text


def group_dishes_by_category(dishes: list[Dish]) -> list[Dish]:
    """Order dishes by menu section, then id."""
    rank = {category: idx for idx, category in enumerate(DishCategory)}
    return sorted(dishes, key=lambda d: (rank[d.category], d.id))
