"""
Configuration management module for BellCurve.

This module handles loading, validating, and managing YAML configuration files
using Pydantic for robust validation and type safety.
"""

from .config_manager import ConfigurationManager
from .models import BellCurveConfig

__all__ = ["ConfigurationManager", "BellCurveConfig"]
