"""
Shared data models for price retrieval and outcome analysis.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict


class PricePoint(BaseModel):
    """One trading day of OHLCV data."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float


class ReturnPoint(BaseModel):
    """Day-over-day closing return."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: datetime
    return_: float = Field(alias="return")


class DistributionPoint(BaseModel):
    """Sample of the horizon return distribution with its implied price."""

    model_config = ConfigDict(frozen=True)

    observation: float
    probability_density: float = Field(ge=0.0)
    price: float


class AnalysisResult(BaseModel):
    """Model for the outcome analysis of a ticker over a horizon."""

    model_config = ConfigDict(validate_assignment=True)

    price_distribution: List[DistributionPoint]
    expected_move: Tuple[float, float]
    probability_of_outcome: float = Field(ge=0.0, le=1.0)
    implied_return: float
    mean_daily_return: float
    std_daily_return: float
    mean_annual_return: float
    std_annual_return: float
    std_periodic_return: float
    returns_history: List[ReturnPoint]


class InitialState(BaseModel):
    """Model for the state presented when a ticker is first loaded."""

    model_config = ConfigDict(validate_assignment=True)

    ticker: str
    current_price: float = Field(gt=0.0)
    target_price: float = Field(gt=0.0)
    horizon_days: int = Field(gt=0)
    price_history: List[PricePoint]
    mean_daily_return: float
    std_daily_return: float
    mean_annual_return: float
    std_annual_return: float
    # Implied volatility requires an option chain, which is not modelled
    implied_volatility: Optional[float] = None
