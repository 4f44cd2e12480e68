"""Configuration loading for Simfolio.

Settings live in a TOML file at ``~/.config/simfolio/config.toml``. The
``SIMFOLIO_CONFIG`` environment variable points at a different file.
"""

import os
from pathlib import Path
from typing import Any, Literal, Optional

import toml
from pydantic import BaseModel, Field, ValidationError

CONFIG_ENV_VAR = "SIMFOLIO_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "simfolio" / "config.toml"


class PortfolioConfig(BaseModel):
    """Portfolio settings."""

    starting_balance: float = Field(default=10000.0, ge=0, description="Initial virtual cash")


class FeedConfig(BaseModel):
    """Price feed settings."""

    latency_seconds: float = Field(default=1.5, ge=0, description="Simulated fetch latency")
    refresh_interval: float = Field(default=30.0, gt=0, description="Seconds between refreshes")
    seed: Optional[int] = Field(default=None, description="Random seed for reproducible prices")


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Root log level"
    )


class SimfolioConfig(BaseModel):
    """Complete Simfolio configuration."""

    portfolio: PortfolioConfig = Field(default_factory=PortfolioConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Where this config was read from, None when defaults were used
    source: Optional[Path] = Field(default=None, exclude=True)
    # Why the file at source could not be used, if it could not
    error: Optional[str] = Field(default=None, exclude=True)


def get_config_path(path: Optional[Path] = None) -> Path:
    """Resolve the config file path.

    Args:
        path: Explicit path, takes precedence over the environment.

    Returns:
        Path to the config file (which may not exist).
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    return DEFAULT_CONFIG_PATH


def parse_config(data: dict[str, Any]) -> SimfolioConfig:
    """Validate a raw config mapping.

    Raises:
        pydantic.ValidationError: If a value is invalid.
    """
    return SimfolioConfig.model_validate(data)


def load_config(path: Optional[Path] = None) -> SimfolioConfig:
    """Load configuration, falling back to defaults.

    A missing file yields the defaults. A file that cannot be parsed or
    validated also yields the defaults, with ``error`` describing why.

    Args:
        path: Explicit config file path.

    Returns:
        SimfolioConfig instance.
    """
    config_path = get_config_path(path)

    if not config_path.exists():
        return SimfolioConfig()

    try:
        data = toml.load(config_path)
    except (OSError, toml.TomlDecodeError) as e:
        return SimfolioConfig(source=config_path, error=f"Could not read config: {e}")

    try:
        config = parse_config(data)
    except ValidationError as e:
        return SimfolioConfig(source=config_path, error=f"Invalid config: {e}")

    return config.model_copy(update={"source": config_path})


def write_default_config(path: Optional[Path] = None) -> Path:
    """Write a config file with default values.

    Args:
        path: Destination path. Defaults to the resolved config path.

    Returns:
        Path the file was written to.
    """
    config_path = get_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = SimfolioConfig().model_dump(exclude_none=True)
    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path
