import json

import pytest

from hassbridge.config.loader import (
    camel_to_snake,
    convert_keys,
    convert_to_camel,
    load_config,
    save_config,
)
from hassbridge.config.schema import Config
from hassbridge.config.validation import find_unknown_paths, read_config_file, validate_config_data


def test_load_config_reads_camel_case_file(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "forwarding": {"retryDelaySeconds": 1.5, "timeoutSeconds": 4},
                "gates": {"proxySelectedMinVersion": "2023.1"},
                "peers": {"hassProxy": "192.168.1.20"},
            }
        )
    )
    cfg = load_config(path)

    assert cfg.forwarding.retry_delay_seconds == 1.5
    assert cfg.forwarding.timeout_seconds == 4.0
    assert cfg.gates.proxy_selected_min_version == "2023.1"
    assert cfg.peers == {"hassProxy": "192.168.1.20"}


def test_load_config_migrates_root_retry_delay(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"retryDelayMs": 2500}))
    cfg = load_config(path)
    assert cfg.forwarding.retry_delay_seconds == 2.5


def test_load_config_falls_back_to_defaults_on_bad_json(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json")
    cfg = load_config(path)
    assert cfg.forwarding.retry_delay_seconds == 3.0
    assert cfg.discovery.service_suffix == "._home-assistant._tcp.local"


def test_save_config_round_trips_peer_ids(tmp_path) -> None:
    path = tmp_path / "nested" / "config.json"
    cfg = Config(peers={"light.kitchen_proxy": "10.0.0.2"})
    save_config(cfg, path)

    data = json.loads(path.read_text())
    assert data["forwarding"]["retryDelaySeconds"] == 3.0
    assert data["peers"] == {"light.kitchen_proxy": "10.0.0.2"}
    assert load_config(path).peers == {"light.kitchen_proxy": "10.0.0.2"}


def test_key_conversion_helpers() -> None:
    assert camel_to_snake("proxySelectedMinVersion") == "proxy_selected_min_version"
    assert convert_keys({"bridge": {"versionHeader": "X"}}) == {"bridge": {"version_header": "X"}}
    assert convert_to_camel({"bridge": {"version_header": "X"}}) == {"bridge": {"versionHeader": "X"}}


def test_config_reads_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("HASSBRIDGE_FORWARDING__TIMEOUT_SECONDS", "2.5")
    cfg = Config()
    assert cfg.forwarding.timeout_seconds == 2.5


def test_load_config_ignores_retry_delay_migration_for_malformed_section(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"retryDelayMs": 2500, "forwarding": "x"}))
    cfg = load_config(path)
    assert cfg.forwarding.retry_delay_seconds == 3.0


def test_config_file_checks_report_typos_but_keep_peer_ids(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "retryDelayMs": 1000,
                "forwarding": {"timeoutSecs": 4},
                "peers": {"hass-proxy": "10.0.0.2"},
            }
        )
    )
    data = read_config_file(path)
    cfg, gate, canonical = validate_config_data(data)

    assert data["forwarding"]["retryDelaySeconds"] == 1.0
    assert cfg.peers == {"hass-proxy": "10.0.0.2"}
    assert gate == (2022, 3)
    assert find_unknown_paths(data, canonical) == ["forwarding.timeoutSecs"]


def test_validate_config_data_rejects_malformed_gate() -> None:
    with pytest.raises(ValueError):
        validate_config_data({"gates": {"proxySelectedMinVersion": "soon"}})
