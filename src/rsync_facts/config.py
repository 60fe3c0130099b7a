"""
Configuration management for rsync-facts.

Supports configuration via YAML files, environment variables, and programmatic access.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from rsync_facts.probe import DEFAULT_RSYNC_COMMAND

DEFAULT_CONFIG_PATHS = [
    Path("/etc/rsync-facts/config.yaml"),
    Path.home() / ".config" / "rsync-facts" / "config.yaml",
    Path("rsync-facts.yaml"),
]

OUTPUT_FORMATS = ["pretty", "json", "yaml", "external"]


@dataclass
class Config:
    """
    Configuration container for rsync-facts.

    Priority (highest to lowest):
    1. Programmatic values passed to __init__
    2. Environment variables (prefixed with RSYNC_FACTS_)
    3. Config file values
    4. Default values
    """

    # Probe settings
    rsync_command: str = DEFAULT_RSYNC_COMMAND
    probe_timeout: float | None = None

    # Fact selection
    enabled_facts: list[str] = field(default_factory=list)
    disabled_facts: list[str] = field(default_factory=list)

    # Output
    output_format: str = "pretty"

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create config from a dictionary."""
        # Flatten nested structure if present
        flat = {}
        for key, value in data.items():
            if isinstance(value, dict):
                for subkey, subvalue in value.items():
                    flat[subkey] = subvalue
            else:
                flat[key] = value

        # Filter to only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in flat.items() if k in known_fields}

        return cls(**filtered)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> Config:
        """
        Load configuration with full resolution order.

        Args:
            config_path: Explicit path to config file. If None, searches
                        default locations.

        Returns:
            Fully resolved Config instance.
        """
        base_config: dict[str, Any] = {}

        # Find and load config file
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    base_config = yaml.safe_load(f) or {}
        else:
            for path in DEFAULT_CONFIG_PATHS:
                if path.exists():
                    with open(path) as f:
                        base_config = yaml.safe_load(f) or {}
                    break

        config = cls.from_dict(base_config) if base_config else cls()

        config._apply_env_overrides()

        return config

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        env_mappings = {
            "RSYNC_FACTS_COMMAND": "rsync_command",
            "RSYNC_FACTS_TIMEOUT": "probe_timeout",
            "RSYNC_FACTS_FORMAT": "output_format",
            "RSYNC_FACTS_LOG_LEVEL": "log_level",
            "RSYNC_FACTS_LOG_FILE": "log_file",
        }

        for env_var, attr in env_mappings.items():
            value = os.environ.get(env_var)
            if value is None:
                continue
            if attr == "probe_timeout":
                # Empty value restores the default of waiting forever
                setattr(self, attr, float(value) if value.strip() else None)
            else:
                setattr(self, attr, value)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "probe": {
                "rsync_command": self.rsync_command,
                "probe_timeout": self.probe_timeout,
            },
            "facts": {
                "enabled_facts": self.enabled_facts,
                "disabled_facts": self.disabled_facts,
            },
            "output": {
                "output_format": self.output_format,
            },
            "logging": {
                "log_level": self.log_level,
                "log_file": self.log_file,
            },
        }

    def save(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
