"""Domain models for the restaurant manager."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class DishCategory(str, Enum):
    """Menu sections. Values are the symbolic names written to disk."""

    DRINKS = "Drinks"
    SALADS = "Salads"
    COLD_STARTERS = "ColdStarters"
    HOT_STARTERS = "HotStarters"
    SOUPS = "Soups"
    MAIN_COURSES = "MainCourses"
    DESSERT = "Dessert"
    OTHER = "Other"


def parse_category(value: str | DishCategory | None) -> DishCategory:
    """
    Resolve a category from free text.

    Unknown or empty input maps to ``DishCategory.OTHER`` instead of being
    rejected; matching is case-insensitive on the symbolic name.
    """
    if isinstance(value, DishCategory):
        return value
    text = (value or "").strip().lower()
    for category in DishCategory:
        if text in {category.value.lower(), category.name.lower()}:
            return category
    return DishCategory.OTHER


@dataclass
class Table:
    """A table in the dining room."""

    id: int
    location: str
    seats: int


@dataclass
class Reservation:
    """A booking of one table by one client over ``[start, end)``."""

    id: int
    client_id: int
    client_name: str
    phone: str
    start: datetime
    end: datetime
    table_id: int
    comment: str = ""

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and start < self.end

    def covers(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass
class Dish:
    """A menu item."""

    id: int
    name: str
    price: Decimal
    category: DishCategory = DishCategory.OTHER
    composition: str = ""
    weight: str = ""
    cook_time_minutes: int = 0


@dataclass
class OrderItem:
    """One order line: a dish reference and a count."""

    dish_id: int
    quantity: int


@dataclass
class Order:
    """A table order; open until ``closed_at`` is stamped."""

    id: int
    client_id: int
    table_id: int
    created_at: datetime
    waiter_id: int = 0
    comment: str = ""
    items: list[OrderItem] = field(default_factory=list)
    closed_at: datetime | None = None
    total: Decimal = Decimal("0")

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)
