"""Demo dataset used to seed an empty restaurant."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from restaurant_manager.models import Dish, DishCategory, Order, OrderItem, Reservation, Table
from restaurant_manager.persistence import Snapshot

SEED_TABLES: list[tuple[int, str, int]] = [
    (1, "by the window", 4),
    (2, "by the aisle", 2),
    (3, "at the back", 6),
    (4, "by the exit", 4),
]

SEED_DISHES: list[dict[str, object]] = [
    {
        "id": 1,
        "name": "Americano",
        "composition": "water, coffee",
        "weight": "200",
        "price": "120.00",
        "category": DishCategory.DRINKS,
        "cook_time_minutes": 5,
    },
    {
        "id": 2,
        "name": "Chicken Caesar",
        "composition": "lettuce, chicken, dressing",
        "weight": "250",
        "price": "420.00",
        "category": DishCategory.SALADS,
        "cook_time_minutes": 15,
    },
    {
        "id": 3,
        "name": "Mushroom soup",
        "composition": "mushrooms, broth",
        "weight": "300",
        "price": "280.00",
        "category": DishCategory.SOUPS,
        "cook_time_minutes": 20,
    },
    {
        "id": 4,
        "name": "Cheesecake",
        "composition": "cream cheese, biscuit",
        "weight": "120",
        "price": "350.00",
        "category": DishCategory.DESSERT,
        "cook_time_minutes": 30,
    },
]

# (id, client_id, name, phone, start hour, end hour, comment, table_id)
SEED_RESERVATIONS: list[tuple[int, int, str, str, int, int, str, int]] = [
    (1, 101, "Max", "88005553535", 12, 15, "Birthday", 3),
    (2, 102, "Anna", "5745552377", 16, 17, "Business meeting", 3),
]


def build_seed(now: datetime) -> Snapshot:
    """Build the demo collections with reservations on ``now``'s day."""
    day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    prices = {int(d["id"]): Decimal(str(d["price"])) for d in SEED_DISHES}

    tables = [Table(id=tid, location=location, seats=seats) for tid, location, seats in SEED_TABLES]
    dishes = [
        Dish(
            id=int(d["id"]),
            name=str(d["name"]),
            composition=str(d["composition"]),
            weight=str(d["weight"]),
            price=prices[int(d["id"])],
            category=d["category"],  # type: ignore[arg-type]
            cook_time_minutes=int(d["cook_time_minutes"]),  # type: ignore[call-overload]
        )
        for d in SEED_DISHES
    ]
    reservations = [
        Reservation(
            id=rid,
            client_id=client_id,
            client_name=name,
            phone=phone,
            start=day + timedelta(hours=start_hour),
            end=day + timedelta(hours=end_hour),
            comment=comment,
            table_id=table_id,
        )
        for rid, client_id, name, phone, start_hour, end_hour, comment, table_id in SEED_RESERVATIONS
    ]
    closed_items = [OrderItem(dish_id=2, quantity=2), OrderItem(dish_id=3, quantity=1)]
    orders = [
        Order(
            id=1,
            client_id=101,
            table_id=3,
            items=closed_items,
            created_at=now - timedelta(hours=2),
            waiter_id=1,
            closed_at=now - timedelta(hours=1),
            total=sum((prices[i.dish_id] * i.quantity for i in closed_items), Decimal("0")),
            comment="Paid in cash",
        ),
        Order(
            id=2,
            client_id=102,
            table_id=1,
            items=[OrderItem(dish_id=1, quantity=3)],
            created_at=now - timedelta(minutes=30),
            waiter_id=2,
        ),
    ]
    return Snapshot(tables=tables, reservations=reservations, dishes=dishes, orders=orders)
