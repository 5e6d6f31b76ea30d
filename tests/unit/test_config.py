"""Unit tests for application settings parsing."""

from typing import Any

import pytest
from pydantic import ValidationError

from aso_combos.config import Settings


def test_cors_origins_accepts_comma_separated_env(monkeypatch: Any) -> None:
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")

    settings = Settings(_env_file=None)

    assert settings.cors_origins == ["https://a.example", "https://b.example"]


def test_cors_origins_accepts_json_array_env(monkeypatch: Any) -> None:
    monkeypatch.setenv("CORS_ORIGINS", '["https://a.example"]')

    settings = Settings(_env_file=None)

    assert settings.cors_origins == ["https://a.example"]


def test_combo_limits_load_from_env(monkeypatch: Any) -> None:
    monkeypatch.setenv("COMBO_MAX_TOTAL", "100")
    monkeypatch.setenv("COMBO_RULES_PATH", "/etc/aso/rules.json")

    settings = Settings(_env_file=None)

    assert settings.combo_max_total == 100
    assert settings.combo_max_per_source == 500
    assert settings.combo_rules_path == "/etc/aso/rules.json"


def test_combo_max_length_below_two_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, combo_max_length=1)


def test_combo_min_length_above_max_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, combo_min_length=4, combo_max_length=3)


def test_api_prefix_is_normalized() -> None:
    assert Settings(_env_file=None, api_v1_prefix="api/v2/").api_v1_prefix == "/api/v2"
    assert Settings(_env_file=None, api_v1_prefix="/").api_v1_prefix == ""
