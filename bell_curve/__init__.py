"""
BellCurve - Probability of a stock reaching a target price.

This package retrieves daily price histories through a local cache with
staleness-based refresh, and estimates the probability of a security reaching
a target price within a horizon under a normal-return assumption.
"""

__version__ = "0.1.0"
__author__ = "BellCurve Team"

# Lazy imports to avoid dependency issues during package setup
__all__ = [
    "AnalysisSystem",
    "AnalysisEngine",
    "RetrievalCache",
    "RecordStore",
    "RecordKind",
    "BellCurveConfig",
    "ConfigurationManager",
    "PricePoint",
    "AnalysisResult",
    "InitialState",
]


def __getattr__(name):
    """Lazy import for package components."""
    if name == "AnalysisSystem":
        from .analysis_system import AnalysisSystem
        return AnalysisSystem
    elif name == "AnalysisEngine":
        from .analysis import AnalysisEngine
        return AnalysisEngine
    elif name == "RetrievalCache":
        from .retrieval import RetrievalCache
        return RetrievalCache
    elif name == "RecordStore":
        from .persistence import RecordStore
        return RecordStore
    elif name == "RecordKind":
        from .persistence import RecordKind
        return RecordKind
    elif name == "BellCurveConfig":
        from .config import BellCurveConfig
        return BellCurveConfig
    elif name == "ConfigurationManager":
        from .config import ConfigurationManager
        return ConfigurationManager
    elif name in ("PricePoint", "AnalysisResult", "InitialState"):
        from . import models
        return getattr(models, name)
    else:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
