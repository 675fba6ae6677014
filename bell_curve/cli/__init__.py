"""
Command-line interface module for BellCurve.

This module provides the CLI interface for analyzing a ticker with different
configuration files and command-line options.
"""

from .cli import main

__all__ = ["main"]
