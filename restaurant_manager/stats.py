"""Read-only aggregations over closed orders."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from restaurant_manager.models import Dish, Order
from restaurant_manager.rendering import format_datetime, format_money

CHECK_RULE = "=" * 36


@dataclass(frozen=True)
class CheckLine:
    order_id: int
    closed_at: datetime | None
    total: Decimal


@dataclass(frozen=True)
class ClientCheck:
    """Closed orders of one client with their grand total."""

    client_id: int
    lines: list[CheckLine]
    total: Decimal


@dataclass(frozen=True)
class DishSales:
    dish: Dish
    count: int


def closed_orders_total(orders: Iterable[Order]) -> Decimal:
    return sum((o.total for o in orders if o.is_closed), Decimal("0"))


def client_check(orders: Iterable[Order], client_id: int) -> ClientCheck | None:
    """Collect a client's closed orders, or None when there are none."""
    closed = [o for o in orders if o.client_id == client_id and o.is_closed]
    if not closed:
        return None
    lines = [CheckLine(order_id=o.id, closed_at=o.closed_at, total=o.total) for o in closed]
    return ClientCheck(client_id=client_id, lines=lines, total=closed_orders_total(closed))


def format_client_check(check: ClientCheck) -> list[str]:
    rows = [f"Check for client {check.client_id}", CHECK_RULE]
    rows.extend(
        f"Order {line.order_id} | {format_datetime(line.closed_at)} | Total: {format_money(line.total)}"
        for line in check.lines
    )
    rows.append(CHECK_RULE)
    rows.append(f"TOTAL: {format_money(check.total)}")
    return rows


def dish_sales(orders: Iterable[Order], dishes: Iterable[Dish]) -> list[DishSales]:
    """
    Count sold portions per dish across closed orders.

    Dishes that have since been deleted are left out. Ties keep the order
    in which the dish was first sold.
    """
    counts: dict[int, int] = defaultdict(int)
    for order in orders:
        if not order.is_closed:
            continue
        for item in order.items:
            counts[item.dish_id] += item.quantity

    by_id = {dish.id: dish for dish in dishes}
    sales = [DishSales(dish=by_id[dish_id], count=count) for dish_id, count in counts.items() if dish_id in by_id]
    sales.sort(key=lambda s: s.count, reverse=True)
    return sales
