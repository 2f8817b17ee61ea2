"""JSON file persistence for the four entity collections."""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, TypeVar

from restaurant_manager.config import (
    DATA_FILES,
    DISHES_FILE,
    ORDERS_FILE,
    RESERVATIONS_FILE,
    TABLES_FILE,
)
from restaurant_manager.models import Dish, Order, OrderItem, Reservation, Table, parse_category

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class StorageReport:
    """Outcome of a load, save or copy; issues are human-readable lines."""

    issues: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    def add(self, message: str) -> None:
        logger.warning("storage_issue %s", message)
        self.issues.append(message)

    def extend(self, other: StorageReport) -> None:
        self.issues.extend(other.issues)


def _dt_out(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _dt_in(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    parsed = datetime.fromisoformat(str(value))
    # The virtual clock is naive; offsets would break every comparison.
    if parsed.tzinfo is not None:
        raise ValueError(f"timestamp {value!r} carries a UTC offset")
    return parsed


def _decimal_in(value: Any) -> Decimal:
    if value in (None, ""):
        return Decimal("0")
    try:
        parsed = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"invalid decimal {value!r}") from exc
    if not parsed.is_finite():
        raise ValueError(f"invalid decimal {value!r}")
    return parsed


def table_to_record(table: Table) -> dict[str, Any]:
    return {"id": table.id, "location": table.location, "seats": table.seats}


def table_from_record(record: dict[str, Any]) -> Table:
    return Table(
        id=int(record["id"]),
        location=str(record.get("location", "")),
        seats=int(record.get("seats", 0)),
    )


def reservation_to_record(reservation: Reservation) -> dict[str, Any]:
    return {
        "id": reservation.id,
        "client_id": reservation.client_id,
        "client_name": reservation.client_name,
        "phone": reservation.phone,
        "start": _dt_out(reservation.start),
        "end": _dt_out(reservation.end),
        "comment": reservation.comment,
        "table_id": reservation.table_id,
    }


def reservation_from_record(record: dict[str, Any]) -> Reservation:
    start = _dt_in(record.get("start"))
    end = _dt_in(record.get("end"))
    if start is None or end is None:
        raise ValueError(f"reservation {record.get('id')!r} is missing start/end")
    return Reservation(
        id=int(record["id"]),
        client_id=int(record.get("client_id", 0)),
        client_name=str(record.get("client_name", "")),
        phone=str(record.get("phone", "")),
        start=start,
        end=end,
        table_id=int(record.get("table_id", 0)),
        comment=str(record.get("comment") or ""),
    )


def dish_to_record(dish: Dish) -> dict[str, Any]:
    return {
        "id": dish.id,
        "name": dish.name,
        "composition": dish.composition,
        "weight": dish.weight,
        "price": str(dish.price),
        "category": dish.category.value,
        "cook_time_minutes": dish.cook_time_minutes,
    }


def dish_from_record(record: dict[str, Any]) -> Dish:
    return Dish(
        id=int(record["id"]),
        name=str(record.get("name", "")),
        composition=str(record.get("composition", "")),
        weight=str(record.get("weight", "")),
        price=_decimal_in(record.get("price")),
        category=parse_category(record.get("category")),
        cook_time_minutes=int(record.get("cook_time_minutes", 0)),
    )


def order_to_record(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "client_id": order.client_id,
        "table_id": order.table_id,
        "items": [{"dish_id": item.dish_id, "quantity": item.quantity} for item in order.items],
        "comment": order.comment,
        "created_at": _dt_out(order.created_at),
        "waiter_id": order.waiter_id,
        "closed_at": _dt_out(order.closed_at),
        "total": str(order.total),
    }


def order_from_record(record: dict[str, Any]) -> Order:
    created_at = _dt_in(record.get("created_at"))
    if created_at is None:
        raise ValueError(f"order {record.get('id')!r} is missing created_at")
    return Order(
        id=int(record["id"]),
        client_id=int(record.get("client_id", 0)),
        table_id=int(record.get("table_id", 0)),
        items=[
            OrderItem(dish_id=int(item["dish_id"]), quantity=int(item["quantity"]))
            for item in record.get("items") or []
        ],
        comment=str(record.get("comment") or ""),
        created_at=created_at,
        waiter_id=int(record.get("waiter_id", 0)),
        closed_at=_dt_in(record.get("closed_at")),
        total=_decimal_in(record.get("total")),
    )


def load_collection(path: Path, decode: Callable[[dict[str, Any]], T], report: StorageReport) -> list[T]:
    """
    Read one array-of-records file.

    A missing file is an empty collection. An unreadable or malformed file
    is also an empty collection, with the problem added to ``report``.
    """
    if not path.is_file():
        return []
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError("expected a JSON array")
        if not all(isinstance(record, dict) for record in raw):
            raise ValueError("expected every record to be a JSON object")
        return [decode(record) for record in raw]
    except (OSError, ValueError, KeyError, TypeError, ArithmeticError) as exc:
        report.add(f"{path.name}: {exc}")
        return []


def save_collection(path: Path, records: list[dict[str, Any]], report: StorageReport) -> None:
    """Overwrite one data file with ``records``."""
    try:
        path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as exc:
        report.add(f"{path.name}: {exc}")


@dataclass
class Snapshot:
    """The four collections as read from, or about to be written to, disk."""

    tables: list[Table] = field(default_factory=list)
    reservations: list[Reservation] = field(default_factory=list)
    dishes: list[Dish] = field(default_factory=list)
    orders: list[Order] = field(default_factory=list)


def ensure_data_dir(data_dir: Path, report: StorageReport) -> bool:
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        report.add(f"{data_dir}: {exc}")
        return False
    return True


def load_snapshot(data_dir: Path) -> tuple[Snapshot, StorageReport]:
    """Read all four files from ``data_dir``."""
    report = StorageReport()
    snapshot = Snapshot(
        tables=load_collection(data_dir / TABLES_FILE, table_from_record, report),
        reservations=load_collection(data_dir / RESERVATIONS_FILE, reservation_from_record, report),
        dishes=load_collection(data_dir / DISHES_FILE, dish_from_record, report),
        orders=load_collection(data_dir / ORDERS_FILE, order_from_record, report),
    )
    logger.debug(
        "snapshot_loaded dir=%s tables=%d reservations=%d dishes=%d orders=%d issues=%d",
        data_dir,
        len(snapshot.tables),
        len(snapshot.reservations),
        len(snapshot.dishes),
        len(snapshot.orders),
        len(report.issues),
    )
    return snapshot, report


def save_snapshot(data_dir: Path, snapshot: Snapshot) -> StorageReport:
    """Rewrite all four files in ``data_dir``."""
    report = StorageReport()
    if not ensure_data_dir(data_dir, report):
        return report
    save_collection(data_dir / TABLES_FILE, [table_to_record(t) for t in snapshot.tables], report)
    save_collection(
        data_dir / RESERVATIONS_FILE, [reservation_to_record(r) for r in snapshot.reservations], report
    )
    save_collection(data_dir / DISHES_FILE, [dish_to_record(d) for d in snapshot.dishes], report)
    save_collection(data_dir / ORDERS_FILE, [order_to_record(o) for o in snapshot.orders], report)
    return report


def copy_data_files(source_dir: Path, target_dir: Path) -> StorageReport:
    """Copy the known data files between directories, skipping any that fail."""
    report = StorageReport()
    if not ensure_data_dir(target_dir, report):
        return report
    for name in DATA_FILES:
        source = source_dir / name
        if not source.is_file():
            continue
        try:
            shutil.copyfile(source, target_dir / name)
        except OSError as exc:
            report.add(f"copy {name}: {exc}")
    return report
