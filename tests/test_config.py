"""Tests for configuration models and the JSON loader."""

import json

import pytest
from pydantic import ValidationError

from modemlink.config.loader import ConfigurationError, load_config, save_config
from modemlink.config.models import AppConfig, LinkConfig, LoggingConfig, SimulatorConfig


def test_defaults():
    config = AppConfig()
    assert config.server.port == 5000
    assert config.serial.baud == 9600
    assert config.link.address is None
    assert config.protocol_log.max_messages == 500
    assert config.simulator.enabled is False


def test_logging_level_normalized():
    assert LoggingConfig(level="debug").level == "DEBUG"


def test_logging_level_invalid():
    with pytest.raises(ValidationError):
        LoggingConfig(level="LOUD")


def test_link_address_non_negative():
    with pytest.raises(ValidationError):
        LinkConfig(address=-1)


def test_corruption_rate_bounds():
    with pytest.raises(ValidationError):
        SimulatorConfig(inject_corruption_rate=1.5)


def test_unknown_top_level_field_rejected():
    with pytest.raises(ValidationError):
        AppConfig(modem={})


def test_load_creates_default_file(tmp_path):
    path = tmp_path / "config.json"
    config = load_config(str(path), require_serial_port=False)
    assert config == AppConfig()
    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8"))["server"]["port"] == 5000


def test_load_existing_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"serial": {"port": "/dev/ttyS1", "baud": 4800}, "link": {"address": 3}}),
        encoding="utf-8",
    )
    config = load_config(str(path))
    assert config.serial.port == "/dev/ttyS1"
    assert config.serial.baud == 4800
    assert config.link.address == 3


def test_load_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        load_config(str(path))


def test_load_validation_errors_name_the_field(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"server": {"port": 0}}), encoding="utf-8")
    with pytest.raises(ConfigurationError, match="server -> port"):
        load_config(str(path))


def test_load_rejects_non_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_save_and_reload(tmp_path):
    path = tmp_path / "config.json"
    config = AppConfig()
    config.serial.port = "/dev/ttyUSB1"
    config.link.address = 12
    save_config(config, str(path))
    assert load_config(str(path)).link.address == 12


def write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_missing_serial_port_reported_at_load(tmp_path):
    path = write_config(tmp_path, {"serial": {"baud": 4800}, "simulator": {"enabled": False}})
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(path)
    message = str(excinfo.value)
    assert "  - serial: " in message
    assert "port is required" in message


def test_missing_serial_section_reported_at_load(tmp_path):
    path = write_config(tmp_path, {"link": {"address": 3}})
    with pytest.raises(ConfigurationError, match="serial: .*port is required"):
        load_config(path)


def test_serial_port_not_required_with_simulator(tmp_path):
    path = write_config(tmp_path, {"simulator": {"enabled": True}})
    assert load_config(path).simulator.enabled is True


def test_serial_port_not_required_when_loopback_forced(tmp_path):
    path = write_config(tmp_path, {"serial": {"port": ""}})
    assert load_config(path, require_serial_port=False).serial.port == ""


def test_created_default_file_still_needs_a_port(tmp_path):
    """The default file is written, then rejected until a port is set."""
    path = tmp_path / "config.json"
    with pytest.raises(ConfigurationError, match="port is required"):
        load_config(str(path))
    assert path.exists()

    data = json.loads(path.read_text(encoding="utf-8"))
    data["serial"]["port"] = "/dev/ttyUSB0"
    path.write_text(json.dumps(data), encoding="utf-8")
    assert load_config(str(path)).serial.port == "/dev/ttyUSB0"


def test_validation_error_lists_every_field(tmp_path):
    path = write_config(tmp_path, {"server": {"port": 0}, "logging": {"level": "LOUD"}})
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(path)
    message = str(excinfo.value)
    assert "server -> port" in message
    assert "logging -> level" in message


def test_logging_rotation_bounds():
    with pytest.raises(ValidationError):
        LoggingConfig(file_max_bytes=10)
    assert LoggingConfig().file_backup_count == 5
