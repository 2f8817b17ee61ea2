"""Main Textual app class."""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widgets import Header, Static

from restaurant_manager.client_modal import ClientIdModal
from restaurant_manager.config import CLOCK_STEP_MINUTES, DEBUG_LOG_PATH
from restaurant_manager.confirm_modal import ConfirmModal
from restaurant_manager.errors import NotFoundError
from restaurant_manager.manager import RestaurantManager
from restaurant_manager.persistence import StorageReport
from restaurant_manager.printer import check_printer_dependencies, print_client_check
from restaurant_manager.rendering import (
    dish_summary,
    format_datetime,
    format_money,
    format_order_label,
    format_reservation_label,
    group_dishes_by_category,
    reservation_summary,
    table_summary,
)
from restaurant_manager.stats import (
    CHECK_RULE,
    client_check,
    closed_orders_total,
    dish_sales,
    format_client_check,
)
from restaurant_manager.text_modal import TextPromptModal, parse_table_id, parse_virtual_now

logger = logging.getLogger(__name__)


def attach_debug_log(path: Path) -> logging.Handler | None:
    """Send package logs to a file; failure to open it is not fatal."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        return None
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    package_logger = logging.getLogger("restaurant_manager")
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(handler)
    return handler


def describe_report(report: StorageReport, success: str) -> str:
    if report.ok:
        return success
    return f"{success} with {len(report.issues)} issue(s): {report.issues[0]}"


class RestaurantApp(App):
    """Operator console over the restaurant's tables, bookings, menu and orders."""

    TITLE = "Restaurant Manager"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    .column {
        width: 1fr;
    }

    .pane {
        height: 1fr;
        border: round $primary;
        padding: 0 1;
    }

    #stats-pane {
        border: round $secondary;
    }

    #info-pane {
        border: round $secondary;
        height: 2fr;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 4;
    }

    .pane-title {
        text-style: bold;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
        ("ctrl+l", "reload", "Reload"),
        ("plus", "shift_clock(1)", "Clock +"),
        ("minus", "shift_clock(-1)", "Clock -"),
        ("n", "reset_clock", "Clock now"),
        ("t", "set_clock", "Set time"),
        ("f", "find_reservations", "Find booking"),
        ("o", "table_info", "Table info"),
        ("d", "data_path", "Data folder"),
        ("i", "seed", "Demo data"),
        ("x", "clear", "Clear all"),
        ("p", "print_check", "Print check"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, manager: RestaurantManager | None = None) -> None:
        super().__init__()
        attach_debug_log(Path(DEBUG_LOG_PATH))
        self.manager = manager or RestaurantManager()
        self.info_title = "Details"
        self.info_rows: list[str] = []
        self.system_status = describe_report(self.manager.last_report, f"Loaded from {self.manager.data_dir}")
        logger.debug("app_init data_dir=%s", self.manager.data_dir)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(classes="column"):
                yield Static(id="tables-pane", classes="pane")
                yield Static(id="reservations-pane", classes="pane")
                yield Static(id="info-pane", classes="pane")
            with Vertical(classes="column"):
                yield Static(id="dishes-pane", classes="pane")
                yield Static(id="orders-pane", classes="pane")
                yield Static(id="stats-pane", classes="pane")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        _, msg = check_printer_dependencies()
        logger.debug("on_mount printer_status=%r", msg)
        self._refresh_all()

    def action_save(self) -> None:
        report = self.manager.save_all()
        self._set_status(describe_report(report, "Data saved"))

    def action_reload(self) -> None:
        report = self.manager.load_all()
        self._set_status(describe_report(report, "Data loaded"))

    def action_shift_clock(self, direction: int) -> None:
        self.manager.clock.advance(timedelta(minutes=CLOCK_STEP_MINUTES * direction))
        self._set_status("Virtual time updated")

    def action_reset_clock(self) -> None:
        self.manager.clock.reset()
        self._set_status("Virtual time reset to the real clock")

    def action_set_clock(self) -> None:
        def _done(value: str | None) -> None:
            if value is None:
                return
            instant, error = parse_virtual_now(value)
            if error:
                self._set_status(error)
            elif instant is None:
                self.action_reset_clock()
            else:
                self.manager.clock.set(instant)
                self._set_status(f"Virtual time set to {format_datetime(instant)}")

        prompt = TextPromptModal(
            "Set virtual time",
            value=format_datetime(self.manager.now),
            help_text="YYYY-MM-DD HH:MM. Leave blank to follow the real clock.",
        )
        self.push_screen(prompt, _done)

    def action_find_reservations(self) -> None:
        def _done(value: str | None) -> None:
            if value is None:
                return
            found = self.manager.find_reservations(value)
            self._show_info(f"Bookings matching {value.strip()!r}", [reservation_summary(r) for r in found])
            self._set_status(f"{len(found)} reservation(s) found")

        self.push_screen(TextPromptModal("Find reservation", help_text="Part of a name or phone number."), _done)

    def action_table_info(self) -> None:
        def _done(value: str | None) -> None:
            if value is None:
                return
            table_id, error = parse_table_id(value)
            if table_id is None:
                self._set_status(error)
                return
            try:
                info = self.manager.table_info(table_id)
            except NotFoundError as exc:
                self._set_status(str(exc))
                return
            self._show_info(f"Table {table_id}", info.splitlines())
            self._set_status(f"Showing table {table_id}")

        self.push_screen(TextPromptModal("Table info", help_text="Table number."), _done)

    def action_data_path(self) -> None:
        def _path_done(value: str | None) -> None:
            if value is None or not value.strip():
                return
            new_path = value.strip()

            def _transfer_done(transfer: bool | None) -> None:
                report = self.manager.set_data_path(new_path, transfer=bool(transfer))
                self._set_status(describe_report(report, f"Data folder set to {self.manager.data_dir}"))

            self.push_screen(ConfirmModal("Copy the current data files to the new folder?"), _transfer_done)

        prompt = TextPromptModal("Data folder", value=str(self.manager.data_dir), help_text="Directory for the JSON files.")
        self.push_screen(prompt, _path_done)

    def action_seed(self) -> None:
        def _done(confirmed: bool | None) -> None:
            if not confirmed:
                return
            report = self.manager.init_defaults()
            self._set_status(describe_report(report, "Demo data created"))

        self.push_screen(ConfirmModal("Create demo data? Current data will be replaced."), _done)

    def action_clear(self) -> None:
        def _done(confirmed: bool | None) -> None:
            if not confirmed:
                return
            report = self.manager.clear_all()
            self._set_status(describe_report(report, "All data removed"))

        self.push_screen(ConfirmModal("Delete ALL data? This cannot be undone."), _done)

    def action_print_check(self) -> None:
        self.push_screen(ClientIdModal(), self._print_check_for)

    def _print_check_for(self, client_id: int | None) -> None:
        if client_id is None:
            return
        check = client_check(self.manager.orders, client_id)
        if check is None:
            self._set_status(f"Client {client_id} has no closed orders")
            return
        try:
            print_client_check(check)
        except Exception as exc:
            logger.warning("check_print_failed client=%d error=%r", client_id, exc)
            rows = [row for row in format_client_check(check) if row != CHECK_RULE]
            self._set_status(f"Print failed ({exc}). " + " / ".join(rows))
            return
        self._set_status(f"Check printed for client {client_id}, total {format_money(check.total)}")

    def _set_status(self, message: str) -> None:
        self.system_status = message
        logger.debug("status %s", message)
        self._refresh_all()

    def _refresh_all(self) -> None:
        try:
            self._refresh_tables()
            self._refresh_reservations()
            self._refresh_dishes()
            self._refresh_orders()
            self._refresh_stats()
            self._refresh_info()
            self._refresh_status()
        except NoMatches:
            return

    def _pane(self, title: str, rows: list[Text | str], empty: str) -> Text:
        lines = Text()
        lines.append(title, style="bold")
        if not rows:
            lines.append(f"\n{empty}", style="dim")
        for row in rows:
            lines.append("\n")
            if isinstance(row, Text):
                lines.append_text(row)
            else:
                lines.append(row)
        return lines

    def _refresh_tables(self) -> None:
        rows: list[Text | str] = []
        for table in sorted(self.manager.tables, key=lambda t: t.id):
            row = Text(table_summary(table))
            if self.manager.is_table_occupied(table.id):
                row.append(" occupied", style="bold #b23a48")
            rows.append(row)
        self.query_one("#tables-pane", Static).update(self._pane("Tables", rows, "(no tables)"))

    def _refresh_reservations(self) -> None:
        now = self.manager.now
        rows: list[Text | str] = [
            format_reservation_label(r, now) for r in sorted(self.manager.reservations, key=lambda r: r.start)
        ]
        self.query_one("#reservations-pane", Static).update(self._pane("Reservations", rows, "(no reservations)"))

    def _refresh_dishes(self) -> None:
        rows: list[Text | str] = [dish_summary(d) for d in group_dishes_by_category(self.manager.dishes)]
        self.query_one("#dishes-pane", Static).update(self._pane("Menu", rows, "(no dishes)"))

    def _refresh_orders(self) -> None:
        rows: list[Text | str] = [format_order_label(o) for o in sorted(self.manager.orders, key=lambda o: o.id)]
        self.query_one("#orders-pane", Static).update(self._pane("Orders", rows, "(no orders)"))

    def _refresh_stats(self) -> None:
        revenue = closed_orders_total(self.manager.orders)
        rows: list[Text | str] = [f"Closed orders total: {format_money(revenue)}"]
        rows.extend(f"{s.dish.name} - {s.count} pcs" for s in dish_sales(self.manager.orders, self.manager.dishes))
        self.query_one("#stats-pane", Static).update(self._pane("Statistics", rows, ""))

    def _show_info(self, title: str, rows: list[str]) -> None:
        self.info_title = title
        self.info_rows = rows

    def _refresh_info(self) -> None:
        rows: list[Text | str] = list(self.info_rows)
        self.query_one("#info-pane", Static).update(self._pane(self.info_title, rows, "(nothing to show)"))

    def _refresh_status(self) -> None:
        text = Text()
        text.append("Virtual now: ", style="bold")
        text.append(format_datetime(self.manager.now))
        text.append(f"  |  Data: {self.manager.data_dir}\n")
        text.append(self.system_status or "Ready")
        self.query_one("#status-bar", Static).update(text)
