"""
Analysis components for return statistics and outcome probabilities.
"""

from .analysis_engine import AnalysisEngine, TRADING_DAYS_PER_YEAR

__all__ = ["AnalysisEngine", "TRADING_DAYS_PER_YEAR"]
