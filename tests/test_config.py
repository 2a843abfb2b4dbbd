"""Tests for service configuration loading."""

from __future__ import annotations

import os

import pytest

from knxcodec import DEFAULT_CONFIG, load_config


def test_missing_file_uses_defaults(tmp_path):
    config = load_config(str(tmp_path / "absent.yaml"))
    assert config == DEFAULT_CONFIG


def test_partial_file_is_merged(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("service:\n  port: 9191\ndefaults:\n  priority: alarm\n")

    config = load_config(str(path))

    assert config["service"]["port"] == 9191
    assert config["service"]["history_size"] == 1000
    assert config["defaults"]["priority"] == "alarm"
    assert config["defaults"]["source_address"] == "1.1.255"


def test_bundled_config_loads():
    root = os.path.dirname(os.path.dirname(__file__))
    config = load_config(os.path.join(root, "config.yaml"))
    assert config["defaults"]["routing_counter"] == 6


@pytest.mark.parametrize(
    "body",
    [
        "defaults:\n  priority: urgent\n",
        "defaults:\n  source_address: '1.1'\n",
        "defaults:\n  routing_counter: 9\n",
    ],
)
def test_bad_defaults_raise(tmp_path, body):
    path = tmp_path / "config.yaml"
    path.write_text(body)
    with pytest.raises(ValueError):
        load_config(str(path))
