"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from src.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field


# Dispatch weights for low/medium/high cost calls
WEIGHT_LOW: int = 5_000
WEIGHT_MID: int = 10_000
WEIGHT_HIGH: int = 20_000


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# FANBASE MODELS
# =============================================================================

class LimitsConfig(StrictModel):
    """Capacity of the bounded per-account indices."""

    max_creator_accounts: int = Field(
        default=16,
        gt=0,
        description="Max creator accounts an account can own"
    )
    max_launch_tokens: int = Field(
        default=256,
        gt=0,
        description="Max launch tokens a creator can mint"
    )
    max_tokens: int = Field(
        default=1024,
        gt=0,
        description="Max tokens an account can hold"
    )


class MethodConfig(StrictModel):
    """Configuration for a marketplace method."""

    weight: int = Field(default=WEIGHT_LOW, ge=0, description="Dispatch weight reported to the host")
    description: str = Field(default="", description="Method description")


def _method(weight: int, description: str) -> Any:
    return Field(default_factory=lambda: MethodConfig(weight=weight, description=description))


class MarketplaceMethodsConfig(StrictModel):
    """Marketplace method configurations."""

    create_account: MethodConfig = _method(
        WEIGHT_HIGH, "Create a creator account. Args: [creator_id]"
    )
    drop_account: MethodConfig = _method(
        WEIGHT_MID, "Drop a creator account. Args: [creator_id]"
    )
    mint: MethodConfig = _method(
        WEIGHT_HIGH, "Mint a launch token. Args: [creator_id, price, metadata]"
    )
    launch_gift: MethodConfig = _method(
        WEIGHT_MID, "Gift a token first hand. Args: [creator_id, launch_token_id, receiver]"
    )
    launch_buy: MethodConfig = _method(
        WEIGHT_MID, "Buy a token first hand. Args: [launch_token_id, bid_price]"
    )
    buy: MethodConfig = _method(
        WEIGHT_MID, "Buy a listed token. Args: [token_id, bid_price]"
    )
    transfer: MethodConfig = _method(
        WEIGHT_MID, "Re-assert ownership of an owned token. Args: [token_id]"
    )
    list: MethodConfig = _method(
        WEIGHT_LOW, "List a token for sale. Args: [token_id, price]"
    )
    unlist: MethodConfig = _method(
        WEIGHT_LOW, "Remove a token from sale. Args: [token_id]"
    )
    set_launch_price: MethodConfig = _method(
        WEIGHT_LOW, "Update launch price. Args: [creator_id, launch_token_id, price]"
    )
    set_price: MethodConfig = _method(
        WEIGHT_LOW, "Update listing price. Args: [token_id, price]"
    )
    burn: MethodConfig = _method(
        WEIGHT_MID, "Destroy a token. Args: [token_id]"
    )


class FanbaseConfig(StrictModel):
    """Creator/token ledger configuration."""

    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    methods: MarketplaceMethodsConfig = Field(default_factory=MarketplaceMethodsConfig)


# =============================================================================
# CURRENCY MODEL
# =============================================================================

class CurrencyConfig(StrictModel):
    """Currency collaborator configuration."""

    existential_deposit: int = Field(
        default=0,
        ge=0,
        description="Minimum balance a keep-alive transfer must leave on the payer"
    )


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Logging configuration."""

    output_file: str = Field(
        default="fanbase_events.jsonl",
        description="JSONL file for marketplace events"
    )
    logs_dir: str = Field(
        default="logs",
        description="Per-run logs directory (e.g., logs/run_20260115_120000/)"
    )
    default_recent: int = Field(
        default=50,
        gt=0,
        description="Default number of recent events to return"
    )
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for the fanbase loggers"
    )


# =============================================================================
# ROOT CONFIG MODEL
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model for the entire application.

    All fields have sensible defaults, so an empty config file is valid.
    """

    fanbase: FanbaseConfig = Field(default_factory=FanbaseConfig)
    currency: CurrencyConfig = Field(default_factory=CurrencyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# LOADING FUNCTIONS
# =============================================================================

def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Args:
        config_dict: Configuration as a dictionary.

    Returns:
        Validated AppConfig instance.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    # Root config
    "AppConfig",
    # Sub-configs
    "FanbaseConfig",
    "LimitsConfig",
    "MarketplaceMethodsConfig",
    "MethodConfig",
    "CurrencyConfig",
    "LoggingConfig",
    # Weights
    "WEIGHT_LOW",
    "WEIGHT_MID",
    "WEIGHT_HIGH",
    # Functions
    "load_validated_config",
    "validate_config_dict",
]
