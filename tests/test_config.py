"""
tests/test_config.py — YAML Configuration Loader Tests
=======================================================
"""

from __future__ import annotations

import pytest

from hacknight.config import DEFAULT_LUMA_BASE_URL, load_config


def test_minimal_config_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("community_name: Hack Night\n", encoding="utf-8")

    cfg = load_config(path)

    assert cfg.community_name == "Hack Night"
    assert cfg.api_port == 8000
    assert cfg.skip_canceled_events is False
    assert cfg.luma_base_url == DEFAULT_LUMA_BASE_URL


def test_full_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "community_name: Hack Night\n"
        "api_port: 9000\n"
        "streaks:\n"
        "  skip_canceled_events: true\n"
        "luma:\n"
        "  base_url: https://luma.test/\n",
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg.api_port == 9000
    assert cfg.skip_canceled_events is True
    assert cfg.luma_base_url == "https://luma.test"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_missing_community_name(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("api_port: 9000\n", encoding="utf-8")
    with pytest.raises(KeyError):
        load_config(path)


def test_config_is_frozen(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("community_name: Hack Night\n", encoding="utf-8")
    cfg = load_config(path)
    with pytest.raises(AttributeError):
        cfg.api_port = 1  # type: ignore[misc]
