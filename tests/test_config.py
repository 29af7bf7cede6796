"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from salonslots.config import AppConfig, CommissionConfig, DefaultsConfig, StoreConfig


def test_defaults_without_file():
    config = AppConfig()

    assert config.defaults.slot_step_minutes == 15
    assert config.store.backend == "json"
    assert config.store.data_file is None
    assert config.commission.to_settings().default_commission == 40.0


def test_load_from_yaml(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "defaults:\n"
        "  slot_step_minutes: 30\n"
        "store:\n"
        "  data_file: data/catalog.json\n"
        "commission:\n"
        "  default_commission: 35\n"
        "  deduct_fees_from_commission: false\n",
        encoding="utf-8",
    )

    config = AppConfig.load_from_yaml(config_path)

    assert config.defaults.slot_step_minutes == 30
    assert config.store.data_file == tmp_path / "data" / "catalog.json"
    settings = config.commission.to_settings()
    assert settings.default_commission == 35
    assert settings.deduct_fees_from_commission is False


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_yaml(tmp_path / "missing.yaml")


def test_invalid_yaml_raises_value_error(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("defaults: [unclosed", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid YAML"):
        AppConfig.load_from_yaml(config_path)


def test_non_mapping_root_raises(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping at the root"):
        AppConfig.load_from_yaml(config_path)


def test_load_or_default_uses_explicit_path(tmp_path):
    config_path = tmp_path / "custom.yaml"
    config_path.write_text("defaults:\n  slot_step_minutes: 20\n", encoding="utf-8")

    assert AppConfig.load_or_default(config_path).defaults.slot_step_minutes == 20


def test_load_or_default_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("salonslots.config.get_default_config_path", lambda: tmp_path / "config.yaml")

    assert AppConfig.load_or_default(None) == AppConfig()


@pytest.mark.parametrize("step", [0, -15, 500])
def test_invalid_slot_step(step):
    with pytest.raises(ValidationError):
        DefaultsConfig(slot_step_minutes=step)


def test_rest_backend_requires_credentials():
    with pytest.raises(ValidationError, match="base_url"):
        StoreConfig(backend="rest")

    store = StoreConfig(backend="rest", base_url="https://example.supabase.co", api_key="key")
    assert store.backend == "rest"


def test_unknown_backend_rejected():
    with pytest.raises(ValidationError):
        StoreConfig(backend="sqlite")


def test_commission_percentages_validated():
    with pytest.raises(ValidationError):
        CommissionConfig(default_commission=120)
    with pytest.raises(ValidationError):
        CommissionConfig(card_fee_credit=-1)


def test_example_config_is_valid():
    example = Path(__file__).parent.parent / "config.example.yaml"

    config = AppConfig.load_from_yaml(example)

    assert config.store.backend == "json"
    assert config.commission.card_fee_credit == 3.5
