"""Global configuration for the fanbase ledger.

Values live in config/config.yaml and are checked against the pydantic
models in config_schema on every load or override, so a bad limit or a
misspelt key is reported before any marketplace call runs.

Usage:
    from src.config import load_config, get, get_validated_config

    load_config()                                   # once, at host startup
    bound = get("fanbase.limits.max_tokens")        # dot-path lookup
    limits = get_validated_config().fanbase.limits  # typed access
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from .config_schema import AppConfig, validate_config_dict


_raw: dict[str, Any] | None = None
_typed: AppConfig | None = None

DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config" / "config.yaml"


def _apply(raw: dict[str, Any]) -> AppConfig:
    """Validate raw, install it as the active config and return the typed view."""
    global _raw, _typed
    typed = validate_config_dict(raw)
    _raw, _typed = raw, typed
    logging.getLogger("src.fanbase").setLevel(typed.logging.level)
    return typed


def load_config(config_path: str | None = None) -> dict[str, Any]:
    """Read a YAML file and make it the active configuration.

    Args:
        config_path: File to read. Defaults to DEFAULT_CONFIG_PATH.

    Returns:
        The raw configuration mapping.

    Raises:
        FileNotFoundError: If the file is missing.
        pydantic.ValidationError: If a value or key is rejected by the schema.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        loaded = yaml.safe_load(f)
    raw: dict[str, Any] = loaded if isinstance(loaded, dict) else {}

    _apply(raw)
    return raw


def get_config() -> dict[str, Any]:
    """Raw configuration mapping, loading the default file on first use."""
    if _raw is None:
        load_config()
    assert _raw is not None
    return _raw


def get_validated_config() -> AppConfig:
    """Typed configuration, loading the default file on first use."""
    if _typed is None:
        load_config()
    assert _typed is not None
    return _typed


def get(key: str, default: Any = None) -> Any:
    """Look up a value by dot path, e.g. get("currency.existential_deposit").

    Returns default when any segment of the path is missing.
    """
    node: Any = get_config()
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node


def set_config_value(key: str, value: Any) -> None:
    """Override one value by dot path and re-validate the whole config.

    Intermediate sections are created as needed. The override is rejected,
    and the previous config kept, if validation fails.

    Raises:
        pydantic.ValidationError: If the resulting config is invalid.
    """
    candidate = copy.deepcopy(get_config())
    *parents, leaf = key.split(".")

    section = candidate
    for part in parents:
        section = section.setdefault(part, {})
    section[leaf] = value

    _apply(candidate)


def reset_config() -> None:
    """Forget the active config; the next access reloads the default file."""
    global _raw, _typed
    _raw = None
    _typed = None
