"""Tests for YAML configuration loading."""

from pathlib import Path

from ambientwatch.config import load_config


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.yaml")
    assert config.device.address == "ambient.local"
    assert config.device.poll_interval == 2.0
    assert config.device.history_size == 120
    assert config.device.request_timeout is None
    assert config.language == "en"


def test_none_gives_defaults():
    assert load_config(None).device.address == "ambient.local"


def test_full_file(tmp_path):
    path = _write(tmp_path, """
language: fi
device:
  address: " 192.168.1.40 "
  poll_interval: 5
  history_size: 60
  request_timeout: 3.5
download_dir: ~/exports
""")
    config = load_config(path)
    assert config.language == "fi"
    assert config.device.address == "192.168.1.40"
    assert config.device.poll_interval == 5.0
    assert config.device.history_size == 60
    assert config.device.request_timeout == 3.5
    assert config.download_dir == Path("~/exports").expanduser()


def test_invalid_values_fall_back(tmp_path):
    path = _write(tmp_path, """
language: sv
device:
  address: ""
  poll_interval: fast
  history_size: -4
""")
    config = load_config(path)
    assert config.language == "en"
    assert config.device.address == "ambient.local"
    assert config.device.poll_interval == 2.0
    assert config.device.history_size == 120


def test_empty_file(tmp_path):
    config = load_config(_write(tmp_path, ""))
    assert config.device.address == "ambient.local"
