"""Tests for config schema validation and the global config loader."""

from pathlib import Path
from typing import Iterator

import pytest
from pydantic import ValidationError

from src import config as config_module
from src.config_schema import (
    WEIGHT_HIGH,
    WEIGHT_LOW,
    WEIGHT_MID,
    load_validated_config,
    validate_config_dict,
)


@pytest.fixture
def fresh_config() -> Iterator[None]:
    """Reset the global config before and after the test."""
    config_module.reset_config()
    yield
    config_module.reset_config()


class TestValidConfig:
    """Test that valid configs are accepted."""

    def test_empty_config_uses_defaults(self) -> None:
        config = validate_config_dict({})
        assert config.fanbase.limits.max_creator_accounts == 16
        assert config.fanbase.limits.max_launch_tokens == 256
        assert config.fanbase.limits.max_tokens == 1024
        assert config.currency.existential_deposit == 0
        assert config.logging.level == "INFO"

    def test_default_method_weights(self) -> None:
        methods = validate_config_dict({}).fanbase.methods
        assert methods.mint.weight == WEIGHT_HIGH
        assert methods.buy.weight == WEIGHT_MID
        assert methods.list.weight == WEIGHT_LOW

    def test_partial_config_merges_defaults(self) -> None:
        config = validate_config_dict({"fanbase": {"limits": {"max_tokens": 8}}})
        assert config.fanbase.limits.max_tokens == 8
        assert config.fanbase.limits.max_launch_tokens == 256

    def test_repo_config_loads(self) -> None:
        config = load_validated_config(config_module.DEFAULT_CONFIG_PATH)
        assert config.fanbase.limits.max_tokens > 0
        assert config.fanbase.methods.burn.description != ""


class TestInvalidConfig:
    """Test that invalid configs are rejected with clear errors."""

    def test_typo_in_key_rejected(self) -> None:
        """Typos in config keys should be rejected (extra='forbid')."""
        with pytest.raises(ValidationError):
            validate_config_dict({"fanbase": {"limts": {}}})

    def test_zero_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"fanbase": {"limits": {"max_tokens": 0}}})

    def test_negative_deposit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"currency": {"existential_deposit": -1}})

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"logging": {"level": "LOUD"}})

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_validated_config(tmp_path / "absent.yaml")


class TestGlobalConfig:
    """Tests for the dot-path accessors."""

    def test_get_by_dot_path(self, fresh_config: None, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("fanbase:\n  limits:\n    max_tokens: 12\n")
        config_module.load_config(str(path))

        assert config_module.get("fanbase.limits.max_tokens") == 12
        assert config_module.get("fanbase.limits.missing", "dflt") == "dflt"
        assert config_module.get_validated_config().fanbase.limits.max_tokens == 12

    def test_set_config_value_revalidates(self, fresh_config: None, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("{}\n")
        config_module.load_config(str(path))

        config_module.set_config_value("currency.existential_deposit", 3)
        assert config_module.get_validated_config().currency.existential_deposit == 3

        with pytest.raises(ValidationError):
            config_module.set_config_value("fanbase.limits.max_tokens", -5)

    def test_rejected_override_keeps_nested_value(self, fresh_config: None, tmp_path: Path) -> None:
        """A failed override must not leak into nested sections of the active config."""
        path = tmp_path / "config.yaml"
        path.write_text("fanbase:\n  limits:\n    max_tokens: 12\n")
        config_module.load_config(str(path))

        with pytest.raises(ValidationError):
            config_module.set_config_value("fanbase.limits.max_tokens", -5)

        assert config_module.get("fanbase.limits.max_tokens") == 12
        assert config_module.get_validated_config().fanbase.limits.max_tokens == 12
