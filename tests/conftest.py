from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal

import pytest

from restaurant_manager.clock import VirtualClock
from restaurant_manager.manager import RestaurantManager

NOON = datetime(2026, 3, 10, 12, 0)


def at(hour: int, minute: int = 0) -> datetime:
    return NOON.replace(hour=hour, minute=minute)


@pytest.fixture
def clock():
    return VirtualClock(start=at(13))


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def config_path(tmp_path, data_dir):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"data_path": str(data_dir)}), encoding="utf-8")
    return path


@pytest.fixture
def manager(clock, config_path):
    return RestaurantManager(clock=clock, config_path=config_path)


@pytest.fixture
def booked(manager):
    """Table 1 with a 12:00-14:00 booking for client 101 and one priced dish."""
    manager.add_table("by the window", 4)
    manager.add_reservation(1, 101, "Max", "88005553535", at(12), at(14))
    manager.add_dish("Borscht", Decimal("100.00"), "Soups")
    return manager
