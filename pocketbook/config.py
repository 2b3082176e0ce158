"""Configuration file management for pocketbook."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

DEFAULT_CONFIG: dict[str, Any] = {
    "currency_symbol": "₹",
    "dashboard_months": 6,
    "analytics_months": 6,
    "recent_limit": 5,
    "log_level": "WARNING",
}


@dataclass(frozen=True)
class Settings:
    """Resolved settings with defaults applied."""

    currency_symbol: str
    dashboard_months: int
    analytics_months: int
    recent_limit: int
    log_level: str


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "pocketbook" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(dict(DEFAULT_CONFIG), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def get_settings(config_path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults for anything not configured.

    A missing config file is not an error; the defaults are used.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Settings with file values layered over the defaults.

    Raises:
        ValueError: If a month count or limit is not a positive integer.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}

    merged = {**DEFAULT_CONFIG, **{k: v for k, v in config.items() if k in DEFAULT_CONFIG}}

    for key in ("dashboard_months", "analytics_months", "recent_limit"):
        value = merged[key]
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ValueError(f"Config value '{key}' must be a positive integer, got {value!r}")

    return Settings(
        currency_symbol=str(merged["currency_symbol"]),
        dashboard_months=merged["dashboard_months"],
        analytics_months=merged["analytics_months"],
        recent_limit=merged["recent_limit"],
        log_level=str(merged["log_level"]),
    )
