"""
Configuration management with YAML loading and environment variable support.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

_SECTIONS = ("stats", "logging")


@dataclass
class StatsConfig:
    jobs: int = 1  # candidates encoded concurrently per layer
    apply_best: bool = False
    timing_warning: bool = True


@dataclass
class LoggingConfig:
    level: str = "WARNING"

    @property
    def level_number(self) -> int:
        """Numeric logging level, WARNING if the name is unknown."""
        level = logging.getLevelName(self.level.upper())
        return level if isinstance(level, int) else logging.WARNING


@dataclass
class AppConfig:
    stats: StatsConfig = field(default_factory=StatsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "AppConfig":
        """Create config from dictionary, ignoring unknown keys."""
        config = cls()

        for attr in _SECTIONS:
            section = getattr(config, attr)
            for key, value in (data.get(attr) or {}).items():
                if hasattr(section, key):
                    setattr(section, key, value)

        return config

    def _to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {attr: dict(vars(getattr(self, attr))) for attr in _SECTIONS}


def _get_default_config_dir() -> Path:
    """Get default config directory."""
    # Check environment variable first
    if config_dir := os.environ.get("EXR_TOOLS_CONFIG_DIR"):
        return Path(config_dir)

    # Check XDG config home
    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "exr-tools"

    # Fall back to ~/.config
    return Path.home() / ".config" / "exr-tools"


def load_config(config_path: Path | None = None, config_dir: Path | None = None) -> AppConfig:
    """
    Load configuration.

    Args:
        config_path: Path to config file (default: searches standard locations)
        config_dir: Config directory searched when no path is given

    Returns:
        AppConfig (defaults if no config file exists)
    """
    if config_path is None:
        if config_dir is None:
            config_dir = _get_default_config_dir()

        # Search for config in standard locations
        search_paths = [
            config_dir / "config.yaml",
            Path.cwd() / "exr-tools.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    return AppConfig.from_yaml(config_path) if config_path else AppConfig()


def validate_config(config: AppConfig) -> list[str]:
    """
    Validate configuration values.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    if not isinstance(config.stats.jobs, int) or config.stats.jobs < 1:
        errors.append(f"stats.jobs must be a positive integer, got {config.stats.jobs!r}")

    if not isinstance(logging.getLevelName(str(config.logging.level).upper()), int):
        errors.append(f"logging.level is not a logging level: {config.logging.level!r}")

    return errors
