"""
Configuration management for the keyword learning engine.

Handles loading, updating, and persisting configuration including
learning thresholds, event listing limits, and database settings.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Optional
import yaml

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Manages system configuration including learning thresholds.

    Provides methods to load, update, and persist configuration with
    support for adjusting the learning gate at runtime.
    """

    DEFAULT_CONFIG = {
        'learning': {
            'min_corrections': 3,
            'min_frequency': 0.5,
        },
        'events': {
            'recent_limit': 20,
            'recent_scan_limit': 100,
            'week_days': 7,
            'month_days': 30,
        },
        'database': {
            'path': 'data/keyword_learning.db',
            'echo': False,
        }
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to YAML configuration file
        """
        self.config_path = config_path
        self.config: dict[str, Any] = {}

        if config_path and config_path.exists():
            self.load_config(config_path)
        else:
            logger.info("No config file found, using defaults")
            self.config = copy.deepcopy(self.DEFAULT_CONFIG)

    def load_config(self, path: Path) -> dict[str, Any]:
        """
        Load configuration from YAML file.

        Raises:
            FileNotFoundError: If config file does not exist
            yaml.YAMLError: If config file is invalid
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise

        if not loaded_config:
            logger.warning(f"Empty config file at {path}, using defaults")
            self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        else:
            self.config = self._merge_with_defaults(loaded_config)

        self.config_path = path
        logger.info(f"Loaded configuration from {path}")

        return self.config

    def get_learning_param(self, name: str) -> Any:
        """
        Get a learning parameter by name.

        Raises:
            KeyError: If parameter not found
        """
        if name not in self.config.get('learning', {}):
            raise KeyError(f"Learning parameter '{name}' not found in configuration")

        return self.config['learning'][name]

    def get_events_param(self, name: str) -> Any:
        """
        Get an event log parameter by name.

        Raises:
            KeyError: If parameter not found
        """
        if name not in self.config.get('events', {}):
            raise KeyError(f"Events parameter '{name}' not found in configuration")

        return self.config['events'][name]

    def get_database_param(self, name: str) -> Any:
        if name not in self.config.get('database', {}):
            raise KeyError(f"Database parameter '{name}' not found in configuration")

        return self.config['database'][name]

    def update_learning_param(self, name: str, value: Any) -> None:
        """
        Update a learning parameter.

        Raises:
            ValueError: If the new value fails validation
        """
        learning = self.config.setdefault('learning', {})
        existed = name in learning
        old_value = learning.get(name)
        learning[name] = value

        errors = self.validate_config()
        if errors:
            if existed:
                learning[name] = old_value
            else:
                del learning[name]
            raise ValueError("; ".join(errors))

        logger.info(f"Updated learning parameter '{name}': {old_value} -> {value}")

    def save_config(self, path: Optional[Path] = None) -> None:
        """
        Save configuration to YAML file.

        Raises:
            ValueError: If no path provided and no config_path set
        """
        save_path = path or self.config_path

        if not save_path:
            raise ValueError("No path provided and no config_path set")

        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(
                self.config,
                f,
                default_flow_style=False,
                sort_keys=False,
                indent=2
            )

        logger.info(f"Saved configuration to {save_path}")

    def get_all_config(self) -> dict[str, Any]:
        """Get a copy of the complete configuration dictionary."""
        return copy.deepcopy(self.config)

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        logger.info("Configuration reset to defaults")

    def _merge_with_defaults(self, loaded_config: dict) -> dict:
        """Merge loaded config with defaults to ensure all keys exist."""
        merged = copy.deepcopy(self.DEFAULT_CONFIG)

        for section, values in loaded_config.items():
            if section in merged and isinstance(values, dict):
                merged[section].update(values)
            else:
                merged[section] = values

        return merged

    def validate_config(self) -> list[str]:
        """
        Validate the current configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        learning = self.config.get('learning', {})
        min_corrections = learning.get('min_corrections')
        if not isinstance(min_corrections, int) or isinstance(min_corrections, bool) or min_corrections < 1:
            errors.append("min_corrections must be a positive integer")

        min_frequency = learning.get('min_frequency')
        if not isinstance(min_frequency, (int, float)) or isinstance(min_frequency, bool):
            errors.append(f"min_frequency must be numeric, got {type(min_frequency)}")
        elif not 0.0 < min_frequency <= 1.0:
            errors.append(f"min_frequency must be in (0, 1], got {min_frequency}")

        events = self.config.get('events', {})
        for name in ('recent_limit', 'recent_scan_limit', 'week_days', 'month_days'):
            value = events.get(name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                errors.append(f"{name} must be a positive integer")

        return errors
