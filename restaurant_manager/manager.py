"""In-memory restaurant state with consistency rules and JSON persistence."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Protocol

from restaurant_manager.clock import VirtualClock
from restaurant_manager.config import Config, config_file_path, load_config, save_config
from restaurant_manager.data import build_seed
from restaurant_manager.errors import ConflictError, NotFoundError, ValidationError
from restaurant_manager.models import Dish, DishCategory, Order, OrderItem, Reservation, Table, parse_category
from restaurant_manager.persistence import (
    Snapshot,
    StorageReport,
    copy_data_files,
    ensure_data_dir,
    load_snapshot,
    save_snapshot,
)
from restaurant_manager.rendering import format_datetime

logger = logging.getLogger(__name__)


class _HasId(Protocol):
    id: int


def next_id(collection: Iterable[_HasId]) -> int:
    """Return one past the largest id, or 1 for an empty collection."""
    return max((entity.id for entity in collection), default=0) + 1


def _require_text(value: str | None, label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{label} must not be empty")
    return text


def _require_interval(start: datetime, end: datetime) -> None:
    if end <= start:
        raise ValidationError("Reservation end must be after its start")


def _to_count(value: int | str, label: str, minimum: int) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"{label} must be a whole number") from exc
    if isinstance(value, float) and count != value:
        raise ValidationError(f"{label} must be a whole number")
    if count < minimum:
        raise ValidationError(f"{label} must be at least {minimum}")
    return count


def _to_price(value: Decimal | int | str) -> Decimal:
    try:
        price = Decimal(str(value))
    except ArithmeticError as exc:
        raise ValidationError(f"Invalid price {value!r}") from exc
    if not price.is_finite() or price <= 0:
        raise ValidationError("Price must be greater than 0")
    return price


class RestaurantManager:
    """
    Owns tables, reservations, dishes and orders.

    Every mutating call validates first and touches the collections last,
    so a rejected call leaves state unchanged. Successful mutations are
    saved straight away; the outcome of the most recent disk access is kept
    in ``last_report``.
    """

    def __init__(
        self,
        clock: VirtualClock | None = None,
        config_path: Path | None = None,
        autoload: bool = True,
    ) -> None:
        self.clock = clock or VirtualClock()
        self.config_path = config_path or config_file_path()
        self.config: Config = load_config(self.config_path)
        self.tables: list[Table] = []
        self.reservations: list[Reservation] = []
        self.dishes: list[Dish] = []
        self.orders: list[Order] = []
        self.last_report = StorageReport()
        if autoload:
            report = StorageReport()
            ensure_data_dir(self.data_dir, report)
            report.extend(self.load_all())
            self.last_report = report

    # -- ids -----------------------------------------------------------------

    @property
    def next_table_id(self) -> int:
        return next_id(self.tables)

    @property
    def next_reservation_id(self) -> int:
        return next_id(self.reservations)

    @property
    def next_dish_id(self) -> int:
        return next_id(self.dishes)

    @property
    def next_order_id(self) -> int:
        return next_id(self.orders)

    # -- clock ---------------------------------------------------------------

    @property
    def now(self) -> datetime:
        return self.clock.now()

    # -- persistence ---------------------------------------------------------

    @property
    def data_dir(self) -> Path:
        return Path(self.config.effective_data_path).expanduser()

    def load_all(self) -> StorageReport:
        """Replace the collections with what is on disk."""
        snapshot, report = load_snapshot(self.data_dir)
        self._apply(snapshot)
        self.last_report = report
        return report

    def save_all(self) -> StorageReport:
        """Write every collection to the data directory."""
        report = save_snapshot(self.data_dir, self._snapshot())
        self.last_report = report
        return report

    def set_data_path(self, new_path: str, transfer: bool = False) -> StorageReport:
        """
        Point the manager at another data directory and reload from it.

        With ``transfer`` the current data files are copied over first;
        files that fail to copy are reported and skipped.
        """
        new_path = _require_text(new_path, "Data path")
        old_dir = self.data_dir
        report = StorageReport()
        if transfer and Path(new_path).expanduser() != old_dir:
            report.extend(copy_data_files(old_dir, Path(new_path).expanduser()))

        self.config.data_path = new_path
        ok, msg = save_config(self.config, self.config_path)
        if not ok:
            report.add(msg)
        ensure_data_dir(self.data_dir, report)
        report.extend(self.load_all())
        self.last_report = report
        logger.info("data_path_changed old=%s new=%s transfer=%s", old_dir, self.data_dir, transfer)
        return report

    def init_defaults(self) -> StorageReport:
        """Replace everything with the demo dataset and save it."""
        self._apply(build_seed(self.now))
        logger.info("seed_loaded")
        return self.save_all()

    def clear_all(self) -> StorageReport:
        self._apply(Snapshot())
        logger.info("all_data_cleared")
        return self.save_all()

    def _snapshot(self) -> Snapshot:
        return Snapshot(
            tables=self.tables,
            reservations=self.reservations,
            dishes=self.dishes,
            orders=self.orders,
        )

    def _apply(self, snapshot: Snapshot) -> None:
        self.tables = snapshot.tables
        self.reservations = snapshot.reservations
        self.dishes = snapshot.dishes
        self.orders = snapshot.orders

    # -- lookups -------------------------------------------------------------

    def find_table(self, table_id: int) -> Table | None:
        return next((t for t in self.tables if t.id == table_id), None)

    def find_reservation(self, reservation_id: int) -> Reservation | None:
        return next((r for r in self.reservations if r.id == reservation_id), None)

    def find_dish(self, dish_id: int) -> Dish | None:
        return next((d for d in self.dishes if d.id == dish_id), None)

    def find_order(self, order_id: int) -> Order | None:
        return next((o for o in self.orders if o.id == order_id), None)

    def get_table(self, table_id: int) -> Table:
        table = self.find_table(table_id)
        if table is None:
            raise NotFoundError("Table", table_id)
        return table

    def get_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.find_reservation(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation", reservation_id)
        return reservation

    def get_dish(self, dish_id: int) -> Dish:
        dish = self.find_dish(dish_id)
        if dish is None:
            raise NotFoundError("Dish", dish_id)
        return dish

    def get_order(self, order_id: int) -> Order:
        order = self.find_order(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def is_table_occupied(self, table_id: int) -> bool:
        """True when a reservation on the table covers the virtual now."""
        now = self.now
        return any(r.table_id == table_id and r.covers(now) for r in self.reservations)

    def _has_overlap(self, table_id: int, start: datetime, end: datetime, exclude_id: int | None = None) -> bool:
        return any(
            r.table_id == table_id and r.id != exclude_id and r.overlaps(start, end) for r in self.reservations
        )

    # -- tables --------------------------------------------------------------

    def add_table(self, location: str, seats: int | str) -> Table:
        location = _require_text(location, "Location")
        seats = _to_count(seats, "Seats", minimum=1)
        table = Table(id=self.next_table_id, location=location, seats=seats)
        self.tables.append(table)
        logger.info("table_added id=%d seats=%d", table.id, seats)
        self.save_all()
        return table

    def edit_table(self, table_id: int, location: str, seats: int | str) -> Table:
        table = self.get_table(table_id)
        if self.is_table_occupied(table_id):
            logger.info("table_edit_rejected id=%d reason=occupied", table_id)
            raise ConflictError(f"Table {table_id} is occupied right now")
        location = _require_text(location, "Location")
        seats = _to_count(seats, "Seats", minimum=1)
        table.location = location
        table.seats = seats
        logger.info("table_edited id=%d", table_id)
        self.save_all()
        return table

    def delete_table(self, table_id: int) -> None:
        table = self.get_table(table_id)
        if any(r.table_id == table_id for r in self.reservations):
            logger.info("table_delete_rejected id=%d reason=has_reservations", table_id)
            raise ConflictError(f"Table {table_id} has reservations")
        self.tables.remove(table)
        logger.info("table_deleted id=%d", table_id)
        self.save_all()

    def table_info(self, table_id: int) -> str:
        """Describe a table and its reservation schedule."""
        table = self.get_table(table_id)
        now = self.now
        lines = [
            f"ID: {table.id}",
            f"Location: {table.location}",
            f"Seats: {table.seats}",
            "Reservation schedule:",
        ]
        schedule = sorted((r for r in self.reservations if r.table_id == table_id), key=lambda r: r.start)
        if not schedule:
            lines.append("  No reservations.")
        for r in schedule:
            active = " (OCCUPIED NOW)" if r.covers(now) else ""
            comment = r.comment.strip() or "empty"
            lines.append(
                f"  {format_datetime(r.start)} - {format_datetime(r.end)}{active}"
                f" | reservation {r.id} | client {r.client_id} | {r.client_name}"
                f" | phone {r.phone} | comment: {comment}"
            )
        return "\n".join(lines)

    # -- reservations --------------------------------------------------------

    def add_reservation(
        self,
        table_id: int,
        client_id: int,
        client_name: str,
        phone: str,
        start: datetime,
        end: datetime,
        comment: str = "",
    ) -> Reservation:
        self.get_table(table_id)
        client_name = _require_text(client_name, "Client name")
        phone = _require_text(phone, "Phone")
        _require_interval(start, end)
        if self._has_overlap(table_id, start, end):
            logger.info("reservation_rejected table=%d reason=overlap", table_id)
            raise ConflictError(f"Table {table_id} is booked at that time")
        reservation = Reservation(
            id=self.next_reservation_id,
            client_id=client_id,
            client_name=client_name,
            phone=phone,
            start=start,
            end=end,
            comment=comment or "",
            table_id=table_id,
        )
        self.reservations.append(reservation)
        logger.info("reservation_added id=%d table=%d client=%d", reservation.id, table_id, client_id)
        self.save_all()
        return reservation

    def edit_reservation(
        self,
        reservation_id: int,
        start: datetime,
        end: datetime,
        comment: str | None = None,
    ) -> Reservation:
        reservation = self.get_reservation(reservation_id)
        _require_interval(start, end)
        if self._has_overlap(reservation.table_id, start, end, exclude_id=reservation_id):
            logger.info("reservation_edit_rejected id=%d reason=overlap", reservation_id)
            raise ConflictError(f"Table {reservation.table_id} is booked at the new time")
        reservation.start = start
        reservation.end = end
        if comment is not None:
            reservation.comment = comment
        logger.info("reservation_edited id=%d", reservation_id)
        self.save_all()
        return reservation

    def extend_reservation(self, reservation_id: int, new_end: datetime) -> Reservation:
        """
        Push a reservation's end later.

        Only the added window ``[old_end, new_end)`` is checked against the
        other reservations on the table.
        """
        reservation = self.get_reservation(reservation_id)
        if new_end <= reservation.end:
            raise ValidationError("New end must be later than the current end")
        if self._has_overlap(reservation.table_id, reservation.end, new_end, exclude_id=reservation_id):
            logger.info("reservation_extend_rejected id=%d reason=overlap", reservation_id)
            raise ConflictError(f"Table {reservation.table_id} is booked after the current end")
        reservation.end = new_end
        logger.info("reservation_extended id=%d", reservation_id)
        self.save_all()
        return reservation

    def cancel_reservation(self, reservation_id: int) -> None:
        reservation = self.get_reservation(reservation_id)
        self.reservations.remove(reservation)
        logger.info("reservation_cancelled id=%d", reservation_id)
        self.save_all()

    def find_reservations(self, query: str) -> list[Reservation]:
        """Match client names case-insensitively and phone numbers verbatim."""
        needle = (query or "").strip()
        if not needle:
            return []
        lowered = needle.lower()
        return [r for r in self.reservations if lowered in r.client_name.lower() or needle in r.phone]

    # -- dishes --------------------------------------------------------------

    def add_dish(
        self,
        name: str,
        price: Decimal | int | str,
        category: str | DishCategory | None = None,
        composition: str = "",
        weight: str = "",
        cook_time_minutes: int | str = 0,
    ) -> Dish:
        name = _require_text(name, "Dish name")
        dish_price = _to_price(price)
        cook_time_minutes = _to_count(cook_time_minutes, "Cook time", minimum=0)
        dish = Dish(
            id=self.next_dish_id,
            name=name,
            composition=composition or "",
            weight=weight or "",
            price=dish_price,
            category=parse_category(category),
            cook_time_minutes=cook_time_minutes,
        )
        self.dishes.append(dish)
        logger.info("dish_added id=%d category=%s", dish.id, dish.category.value)
        self.save_all()
        return dish

    def edit_dish(
        self,
        dish_id: int,
        name: str,
        price: Decimal | int | str,
        category: str | DishCategory | None = None,
        composition: str = "",
        weight: str = "",
        cook_time_minutes: int | str = 0,
    ) -> Dish:
        dish = self.get_dish(dish_id)
        name = _require_text(name, "Dish name")
        dish_price = _to_price(price)
        cook_time_minutes = _to_count(cook_time_minutes, "Cook time", minimum=0)
        dish.name = name
        dish.composition = composition or ""
        dish.weight = weight or ""
        dish.price = dish_price
        dish.category = parse_category(category)
        dish.cook_time_minutes = cook_time_minutes
        logger.info("dish_edited id=%d", dish_id)
        self.save_all()
        return dish

    def delete_dish(self, dish_id: int) -> None:
        dish = self.get_dish(dish_id)
        if any(item.dish_id == dish_id for order in self.orders for item in order.items):
            logger.info("dish_delete_rejected id=%d reason=in_orders", dish_id)
            raise ConflictError(f"Dish {dish_id} is used in orders")
        self.dishes.remove(dish)
        logger.info("dish_deleted id=%d", dish_id)
        self.save_all()

    # -- orders --------------------------------------------------------------

    def create_order(self, client_id: int, table_id: int, waiter_id: int = 1, comment: str = "") -> Order:
        """Open an order; the client must hold a reservation on the table covering now."""
        self.get_table(table_id)
        now = self.now
        if not any(
            r.client_id == client_id and r.table_id == table_id and r.covers(now) for r in self.reservations
        ):
            logger.info("order_rejected client=%d table=%d reason=no_active_reservation", client_id, table_id)
            raise ConflictError(f"Client {client_id} has no active reservation at table {table_id}")
        order = Order(
            id=self.next_order_id,
            client_id=client_id,
            table_id=table_id,
            created_at=now,
            waiter_id=waiter_id,
            comment=comment or "",
        )
        self.orders.append(order)
        logger.info("order_created id=%d client=%d table=%d", order.id, client_id, table_id)
        self.save_all()
        return order

    def add_order_item(self, order_id: int, dish_id: int, quantity: int | str) -> OrderItem:
        order = self.get_order(order_id)
        if order.is_closed:
            raise ConflictError(f"Order {order_id} is closed")
        quantity = _to_count(quantity, "Quantity", minimum=1)
        self.get_dish(dish_id)
        item = OrderItem(dish_id=dish_id, quantity=quantity)
        order.items.append(item)
        logger.info("order_item_added order=%d dish=%d qty=%d", order_id, dish_id, quantity)
        self.save_all()
        return item

    def order_total(self, order: Order) -> Decimal:
        """Sum of quantity x price; lines whose dish no longer exists count as 0."""
        prices = {dish.id: dish.price for dish in self.dishes}
        return sum(
            (prices.get(item.dish_id, Decimal("0")) * item.quantity for item in order.items),
            Decimal("0"),
        )

    def close_order(self, order_id: int) -> Order:
        order = self.get_order(order_id)
        if order.is_closed:
            raise ConflictError(f"Order {order_id} is already closed")
        order.total = self.order_total(order)
        order.closed_at = self.now
        logger.info("order_closed id=%d total=%s", order_id, order.total)
        self.save_all()
        return order

    def delete_order(self, order_id: int) -> None:
        order = self.get_order(order_id)
        self.orders.remove(order)
        logger.info("order_deleted id=%d", order_id)
        self.save_all()
