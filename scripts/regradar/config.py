"""
Configuration management for RegulatorRadar.

Handles loading and accessing configuration from YAML files and environment variables.
Configuration objects are built explicitly and passed to the services that need them.
"""

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


class Config:
    """Configuration manager backed by defaults and an optional YAML file."""

    # Default configuration values
    DEFAULTS: Dict[str, Any] = {
        "paths": {
            "base_dir": None,  # Set dynamically
            "database": "db/regradar.db",
            "logs": "logs",
        },
        "analysis": {
            "max_summary_length": 500,
            "max_action_items": 8,
            "include_time_estimates": True,
            "severity_adjustment_factor": 1.0,
            "enable_plain_english_summary": True,
            "enable_action_item_generation": True,
        },
        "processing": {
            "enable_impact_analysis": True,
            "enable_storage": True,
            "severity_threshold": 1,
            "max_processing_seconds": 300,
            "immediate_alert_threshold": 7,
            "retention_days": 30,
        },
        "feeds": {
            "enabled": ["pressReleases", "rules", "proposedRules", "enforcementActions"],
            "max_items_per_feed": 50,
            "request_timeout": 15,
            "user_agent": "RegulatorRadar/1.0",
            "fintech_only": True,
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "file_enabled": True,
        },
    }

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        """
        Initialize configuration.

        Args:
            base_dir: Base directory for data and config files. Falls back to
                REGRADAR_BASE_DIR, then to the repository root.
        """
        self._config: Dict[str, Any] = copy.deepcopy(self.DEFAULTS)
        self._base_dir = Path(base_dir) if base_dir else self._find_base_dir()
        self._load_config_file()

    def _find_base_dir(self) -> Path:
        """Find the base directory of the RegulatorRadar installation."""
        env_base = os.environ.get("REGRADAR_BASE_DIR")
        if env_base:
            return Path(env_base)

        # scripts/regradar/config.py -> scripts/regradar -> scripts -> base
        return Path(__file__).resolve().parent.parent.parent

    def _load_config_file(self) -> None:
        """Load configuration from YAML file if it exists."""
        config_path = self._base_dir / "config" / "config.yaml"
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
                if not isinstance(file_config, dict):
                    raise ValueError(f"Invalid configuration file: {config_path}")
                self._merge_config(file_config)

        self._config["paths"]["base_dir"] = str(self._base_dir)

    def _merge_config(self, new_config: Dict[str, Any]) -> None:
        """Deep merge new configuration into existing configuration."""
        for key, value in new_config.items():
            if key in self._config and isinstance(self._config[key], dict) and isinstance(value, dict):
                self._config[key].update(value)
            else:
                self._config[key] = value

    @property
    def base_dir(self) -> Path:
        """Get the base directory path."""
        return self._base_dir

    @property
    def database_path(self) -> Path:
        """Get the database file path."""
        return self._base_dir / self._config["paths"]["database"]

    @property
    def logs_dir(self) -> Path:
        """Get the logs directory path."""
        return self._base_dir / self._config["paths"]["logs"]

    @property
    def enabled_feeds(self) -> List[str]:
        return list(self._config["feeds"].get("enabled", []))

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key.

        Supports dot notation for nested keys (e.g., 'analysis.max_action_items').
        """
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = copy.deepcopy(self.DEFAULTS)
        self._load_config_file()


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings for the impact analyzer and translator."""

    max_summary_length: int = 500
    max_action_items: int = 8
    include_time_estimates: bool = True
    severity_adjustment_factor: float = 1.0
    enable_plain_english_summary: bool = True
    enable_action_item_generation: bool = True

    def __post_init__(self) -> None:
        if self.max_summary_length < 10:
            raise ValueError("max_summary_length must be at least 10 characters")
        if self.max_action_items < 1:
            raise ValueError("max_action_items must be at least 1")
        if self.severity_adjustment_factor <= 0:
            raise ValueError("severity_adjustment_factor must be positive")

    @classmethod
    def from_config(cls, config: Config) -> "AnalysisConfig":
        """Build analysis settings from the 'analysis' section of a Config."""
        return cls(
            max_summary_length=int(config.get("analysis.max_summary_length", 500)),
            max_action_items=int(config.get("analysis.max_action_items", 8)),
            include_time_estimates=bool(config.get("analysis.include_time_estimates", True)),
            severity_adjustment_factor=float(
                config.get("analysis.severity_adjustment_factor", 1.0)
            ),
            enable_plain_english_summary=bool(
                config.get("analysis.enable_plain_english_summary", True)
            ),
            enable_action_item_generation=bool(
                config.get("analysis.enable_action_item_generation", True)
            ),
        )


@dataclass(frozen=True)
class ProcessingConfig:
    """Settings for the end-to-end processing pipeline."""

    enable_impact_analysis: bool = True
    enable_storage: bool = True
    severity_threshold: int = 1
    max_processing_seconds: float = 300.0
    immediate_alert_threshold: int = 7

    def __post_init__(self) -> None:
        if not 1 <= self.severity_threshold <= 10:
            raise ValueError("severity_threshold must be between 1 and 10")
        if self.max_processing_seconds <= 0:
            raise ValueError("max_processing_seconds must be positive")

    @classmethod
    def from_config(cls, config: Config) -> "ProcessingConfig":
        """Build pipeline settings from the 'processing' section of a Config."""
        return cls(
            enable_impact_analysis=bool(config.get("processing.enable_impact_analysis", True)),
            enable_storage=bool(config.get("processing.enable_storage", True)),
            severity_threshold=int(config.get("processing.severity_threshold", 1)),
            max_processing_seconds=float(config.get("processing.max_processing_seconds", 300)),
            immediate_alert_threshold=int(config.get("processing.immediate_alert_threshold", 7)),
        )
