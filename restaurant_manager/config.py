"""Runtime configuration defaults for persistence, the console and printing."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"
_CONFIG_OVERRIDE_ENV = "RESTAURANT_CONFIG_FILE"

DEFAULT_DATA_PATH = str(Path.home() / "Restaurant_Data")

TABLES_FILE = "tables.json"
RESERVATIONS_FILE = "reservations.json"
DISHES_FILE = "dishes.json"
ORDERS_FILE = "orders.json"
DATA_FILES = (TABLES_FILE, RESERVATIONS_FILE, DISHES_FILE, ORDERS_FILE)

DATETIME_FORMAT = "%Y-%m-%d %H:%M"
DEBUG_LOG_PATH = "/tmp/restaurant-debug.log"

# Console clock nudge.
CLOCK_STEP_MINUTES = 30

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_FONT_ENV = "RESTAURANT_PRINTER_FONT_PATH"
PRINTER_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)
PRINTER_LEFT_INDENT_PX = 8
PRINTER_FOOTER_SPACER_PX = 70


@dataclass
class Config:
    """Persisted settings; currently only the data directory."""

    data_path: str = ""

    @property
    def effective_data_path(self) -> str:
        return self.data_path.strip() or DEFAULT_DATA_PATH


def config_file_path() -> Path:
    """Config location, honouring the RESTAURANT_CONFIG_FILE override."""
    override = os.environ.get(_CONFIG_OVERRIDE_ENV, "").strip()
    return Path(override or CONFIG_FILE)


def load_config(path: Path | None = None) -> Config:
    """Read the config file, returning defaults when it is missing or unreadable."""
    path = path or config_file_path()
    if not path.is_file():
        return Config()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("config unreadable path=%s error=%r", path, exc)
        return Config()
    if not isinstance(raw, dict):
        logger.warning("config ignored path=%s reason=not_an_object", path)
        return Config()
    return Config(data_path=str(raw.get("data_path") or ""))


def save_config(config: Config, path: Path | None = None) -> tuple[bool, str]:
    """Write the config file and report whether it succeeded."""
    path = path or config_file_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"data_path": config.data_path}, indent=2), encoding="utf-8")
    except OSError as exc:
        logger.warning("config not saved path=%s error=%r", path, exc)
        return (False, f"Config not saved: {exc}")
    return (True, f"Config saved to {path}")
