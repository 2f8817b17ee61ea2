from datetime import datetime, timedelta

from restaurant_manager.clock import VirtualClock
from restaurant_manager.config import Config, DEFAULT_DATA_PATH, config_file_path, load_config, save_config


def test_virtual_clock_only_moves_when_told():
    real = [datetime(2026, 1, 1, 9, 0)]
    clock = VirtualClock(source=lambda: real[0])
    assert clock.now() == datetime(2026, 1, 1, 9, 0)

    real[0] = datetime(2026, 1, 1, 10, 0)
    assert clock.now() == datetime(2026, 1, 1, 9, 0)

    clock.set(datetime(2030, 5, 5, 20, 0))
    assert clock.advance(timedelta(minutes=30)) == datetime(2030, 5, 5, 20, 30)
    assert clock.reset() == datetime(2026, 1, 1, 10, 0)


def test_config_round_trip(tmp_path):
    path = tmp_path / "nested" / "config.json"
    ok, _ = save_config(Config(data_path="/srv/restaurant"), path)
    assert ok
    assert load_config(path).data_path == "/srv/restaurant"


def test_config_defaults_when_missing_or_unreadable(tmp_path):
    assert load_config(tmp_path / "missing.json").effective_data_path == DEFAULT_DATA_PATH
    broken = tmp_path / "broken.json"
    broken.write_text("[1, 2", encoding="utf-8")
    assert load_config(broken).data_path == ""
    listed = tmp_path / "listed.json"
    listed.write_text("[]", encoding="utf-8")
    assert load_config(listed).effective_data_path == DEFAULT_DATA_PATH


def test_blank_data_path_uses_default():
    assert Config(data_path="   ").effective_data_path == DEFAULT_DATA_PATH


def test_config_file_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv("RESTAURANT_CONFIG_FILE", str(tmp_path / "alt.json"))
    assert config_file_path() == tmp_path / "alt.json"
    monkeypatch.delenv("RESTAURANT_CONFIG_FILE")
    assert config_file_path().name == "config.json"
