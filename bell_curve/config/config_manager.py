"""
Configuration manager for loading and validating YAML configuration files.
"""

import os
import yaml
import logging
from pathlib import Path
from typing import Optional, Dict, Any

from pydantic import ValidationError

from .models import BellCurveConfig


logger = logging.getLogger(__name__)


class ConfigurationManager:
    """Manages loading and validation of YAML configuration files."""

    DEFAULT_CONFIG_FILENAME = "config.yaml"
    API_KEY_ENV_VAR = "BELLCURVE_API_KEY"

    def load_config(self, config_path: Optional[str] = None) -> BellCurveConfig:
        """
        Load and validate configuration from YAML file.

        Environment overrides are applied after the file is validated.

        Args:
            config_path: Path to configuration file. If None, uses default.

        Returns:
            Validated BellCurveConfig instance.
        """
        if config_path is None:
            config_path = self.get_default_config_path()

        try:
            config_dict = self._load_yaml_file(config_path)
            config = self.validate_config(config_dict)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            logger.info("Using default configuration")
            config = BellCurveConfig()

        return self.apply_environment(config)

    def validate_config(self, config: Dict[str, Any]) -> BellCurveConfig:
        """
        Validate configuration dictionary using Pydantic.

        Args:
            config: Configuration dictionary to validate.

        Returns:
            Validated BellCurveConfig instance.
        """
        try:
            return BellCurveConfig(**config)
        except (ValidationError, TypeError) as e:
            logger.warning(f"Configuration validation failed: {e}")
            logger.info("Using default configuration")
            return BellCurveConfig()

    def apply_environment(self, config: BellCurveConfig) -> BellCurveConfig:
        """Apply environment variable overrides (API key) to a configuration."""
        api_key = os.getenv(self.API_KEY_ENV_VAR)
        if api_key:
            logger.debug(f"Using API key from {self.API_KEY_ENV_VAR}")
            config = config.model_copy(update={"api_key": api_key})
        return config

    def get_default_config_path(self) -> str:
        """Get the default configuration file path."""
        return self.DEFAULT_CONFIG_FILENAME

    def _load_yaml_file(self, file_path: str) -> Dict[str, Any]:
        """Load YAML file and return as dictionary."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(path, 'r', encoding='utf-8') as file:
            return yaml.safe_load(file) or {}
