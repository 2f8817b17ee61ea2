from datetime import datetime

from restaurant_manager.text_modal import parse_table_id, parse_virtual_now


def test_virtual_now_parses_display_format():
    assert parse_virtual_now(" 2026-03-10 19:30 ") == (datetime(2026, 3, 10, 19, 30), "")


def test_blank_virtual_now_means_real_clock():
    assert parse_virtual_now("   ") == (None, "")


def test_bad_virtual_now_explains_format():
    instant, error = parse_virtual_now("10/03/2026 19:30")
    assert instant is None
    assert "Y-m-d H:M" in error


def test_table_id_entry():
    assert parse_table_id(" 3 ") == (3, "")
    assert parse_table_id("0")[0] is None
    assert parse_table_id("three") == (None, "Table number must be digits.")
    assert parse_table_id("-1")[0] is None
