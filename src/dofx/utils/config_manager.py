"""Configuration management for dofx."""

import codecs
import json
import os
import yaml
from typing import Dict, Any, Optional
import logging

from ..models.core import DofxConfig, REPORT_ORDERS, ERROR_POLICIES


logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration value is invalid"""


class ConfigManager:
    """Manages loading and validation of dofx configuration"""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager

        Args:
            config_path: Path to configuration file. If None, searches for default locations.
        """
        self.config_path = config_path
        self._config_cache: Optional[DofxConfig] = None

    def load_config(self, force_reload: bool = False) -> DofxConfig:
        """Load configuration from file or return default

        Args:
            force_reload: Force reload from file even if cached

        Returns:
            DofxConfig instance with loaded or default configuration
        """
        if self._config_cache is not None and not force_reload:
            return self._config_cache

        config_data = self._load_config_file()
        defaults = DofxConfig()

        try:
            self._config_cache = DofxConfig(
                encoding=config_data.get('encoding', defaults.encoding),
                output_suffix=config_data.get('output_suffix', defaults.output_suffix),
                fitid_length=config_data.get('fitid_length', defaults.fitid_length),
                fitid_alphabet=config_data.get('fitid_alphabet', defaults.fitid_alphabet),
                report_order=config_data.get('report_order', defaults.report_order),
                error_policy=config_data.get('error_policy', defaults.error_policy),
                seed=config_data.get('seed', defaults.seed),
                log_directory=config_data.get('log_directory', defaults.log_directory)
            )

            logger.debug(f"Configuration loaded successfully from {self.config_path or 'defaults'}")
            return self._config_cache

        except Exception as e:
            logger.warning(f"Error loading configuration: {e}. Using defaults.")
            self._config_cache = DofxConfig()
            return self._config_cache

    def _load_config_file(self) -> Dict[str, Any]:
        """Load configuration from file

        Returns:
            Dictionary with configuration data or empty dict if no file found
        """
        config_file = self._find_config_file()

        if not config_file or not os.path.exists(config_file):
            logger.debug("No configuration file found, using defaults")
            return {}

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.endswith('.json'):
                    data = json.load(f)
                elif config_file.endswith(('.yml', '.yaml')):
                    data = yaml.safe_load(f)
                else:
                    logger.warning(f"Unsupported config file format: {config_file}")
                    return {}

            self._validate_config_data(data)
            logger.debug(f"Configuration loaded from {config_file}")
            return data

        except Exception as e:
            logger.error(f"Error reading configuration file {config_file}: {e}")
            return {}

    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in standard locations

        Returns:
            Path to configuration file or None if not found
        """
        if self.config_path:
            return self.config_path

        search_paths = [
            'dofx_config.json',
            'dofx_config.yml',
            'dofx_config.yaml',
            'config/dofx_config.json',
            'config/dofx_config.yml',
            'config/dofx_config.yaml',
            os.path.expanduser('~/.dofx/config.json'),
            os.path.expanduser('~/.dofx/config.yml'),
        ]

        for path in search_paths:
            if os.path.exists(path):
                return path

        return None

    def _validate_config_data(self, data: Dict[str, Any]) -> None:
        """Validate configuration data structure

        Args:
            data: Configuration data to validate

        Raises:
            ConfigError: If configuration data is invalid
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a dictionary")

        for key, value in data.items():
            validate_config_value(key, value)

    def update_config(self, updates: Dict[str, Any]) -> None:
        """Update configuration with new values

        Args:
            updates: Dictionary of configuration updates

        Raises:
            ConfigError: If a key is unknown or a value is invalid
        """
        if self._config_cache is None:
            self.load_config()

        for key, value in updates.items():
            if not hasattr(self._config_cache, key):
                raise ConfigError(f"Unknown configuration key: {key}")
            validate_config_value(key, value)
            setattr(self._config_cache, key, value)
            logger.debug(f"Updated configuration: {key} = {value}")

    def reset_config(self) -> None:
        """Reset configuration cache, forcing reload on next access"""
        self._config_cache = None
        logger.debug("Configuration cache reset")

    def save_config_template(self, output_path: str) -> None:
        """Generate and save a configuration file template

        Args:
            output_path: Path where to save the template
        """
        template = DofxConfig().to_dict()

        try:
            output_dir = os.path.dirname(output_path)
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)

            with open(output_path, 'w', encoding='utf-8') as f:
                if output_path.endswith(('.yml', '.yaml')):
                    yaml.dump(template, f, default_flow_style=False, indent=2)
                else:
                    json.dump(template, f, indent=2)

            logger.info(f"Configuration template saved to {output_path}")

        except Exception as e:
            logger.error(f"Error saving configuration template: {e}")
            raise


def validate_config_value(key: str, value: Any) -> None:
    """Check a single configuration value

    Raises:
        ConfigError: If the value is invalid for the key
    """
    if key == 'encoding':
        if not isinstance(value, str) or not value.strip():
            raise ConfigError("encoding must be a non-empty string")
        try:
            codecs.lookup(value)
        except LookupError:
            raise ConfigError(f"Unknown encoding: {value}")
    elif key == 'output_suffix':
        if not isinstance(value, str) or not value:
            raise ConfigError("output_suffix must be a non-empty string")
        if os.sep in value or (os.altsep and os.altsep in value):
            raise ConfigError("output_suffix cannot contain path separators")
    elif key == 'fitid_length':
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError("fitid_length must be a positive integer")
    elif key == 'fitid_alphabet':
        if not isinstance(value, str) or not value:
            raise ConfigError("fitid_alphabet must be a non-empty string")
    elif key == 'report_order':
        if value not in REPORT_ORDERS:
            raise ConfigError(f"report_order must be one of {', '.join(REPORT_ORDERS)}")
    elif key == 'error_policy':
        if value not in ERROR_POLICIES:
            raise ConfigError(f"error_policy must be one of {', '.join(ERROR_POLICIES)}")
    elif key == 'seed':
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ConfigError("seed must be an integer or null")
    elif key == 'log_directory':
        if value is not None and not isinstance(value, str):
            raise ConfigError("log_directory must be a string or null")
    else:
        raise ConfigError(f"Unknown configuration key: {key}")
