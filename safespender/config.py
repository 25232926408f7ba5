"""Configuration file management for safespender."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from safespender.domain.models import ContributionPolicy

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class Settings:
    """Validated configuration values."""

    currency: str = "GBP"
    contribution_policy: ContributionPolicy = ContributionPolicy.MONTHLY
    calendar_padding_months: int = 1
    log_level: str = "WARNING"


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
    return get_xdg_config_home() / "safespender" / "config.toml"


def create_default_config(config_path: Path | None = None, currency: str = "GBP") -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
        currency: Base currency code to record.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    defaults = Settings(currency=currency.upper())
    default_config: dict[str, Any] = {
        "currency": defaults.currency,
        "contribution_policy": defaults.contribution_policy.value,
        "calendar_padding_months": defaults.calendar_padding_months,
        "log_level": defaults.log_level,
    }

    save_config(default_config, config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
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


def parse_settings(config: dict[str, Any]) -> Settings:
    """Validate a raw configuration dictionary.

    Missing keys take their defaults.

    Args:
        config: Raw configuration from the TOML file.

    Returns:
        Settings.

    Raises:
        ValueError: If a value is not recognised.
    """
    defaults = Settings()

    currency = str(config.get("currency", defaults.currency)).upper()
    if len(currency) != 3 or not currency.isalpha():
        raise ValueError(f"Invalid currency code '{currency}'")

    policy_value = config.get("contribution_policy", defaults.contribution_policy.value)
    try:
        policy = ContributionPolicy(policy_value)
    except ValueError:
        choices = ", ".join(p.value for p in ContributionPolicy)
        raise ValueError(f"Invalid contribution_policy '{policy_value}' (choose from {choices})") from None

    padding = config.get("calendar_padding_months", defaults.calendar_padding_months)
    if not isinstance(padding, int) or isinstance(padding, bool) or padding < 0:
        raise ValueError(f"calendar_padding_months must be a non-negative integer, got {padding!r}")

    log_level = str(config.get("log_level", defaults.log_level)).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Invalid log_level '{log_level}' (choose from {', '.join(LOG_LEVELS)})")

    return Settings(
        currency=currency,
        contribution_policy=policy,
        calendar_padding_months=padding,
        log_level=log_level,
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load and validate settings, falling back to defaults without a config file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Settings.

    Raises:
        ValueError: If the file holds an unrecognised value.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return Settings()
    return parse_settings(config)
