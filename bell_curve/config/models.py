"""
Configuration models using Pydantic for validation.
"""

from datetime import timedelta
from pydantic import BaseModel, Field, ConfigDict
from typing import Literal, Optional

from ..persistence.models import RecordKind


class BellCurveConfig(BaseModel):
    """Configuration model for price retrieval and outcome analysis."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid"
    )

    cache_dir: Optional[str] = Field(
        default=None,
        description="Directory for cached price records (defaults to ~/.bell_curve/price_cache)"
    )
    current_price_max_age_hours: float = Field(
        default=24.0,
        gt=0.0,
        description="Age after which a cached current price is refreshed"
    )
    price_history_max_age_hours: float = Field(
        default=168.0,
        gt=0.0,
        description="Age after which a cached price history is refreshed"
    )
    fetch_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        description="Timeout for a single remote fetch"
    )
    price_source: Literal["yfinance", "http"] = Field(
        default="yfinance",
        description="Remote source used to fetch daily price series"
    )
    history_period: str = Field(
        default="1y",
        description="Length of price history requested from yfinance"
    )
    api_base_url: str = Field(
        default="https://bellcurveapi.herokuapp.com/api",
        description="Base URL of the HTTP daily-series endpoint"
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key for the HTTP source (usually set via BELLCURVE_API_KEY)"
    )
    default_horizon_days: int = Field(
        default=30,
        ge=1,
        description="Horizon used when none is given"
    )
    initial_target_return: float = Field(
        default=0.10,
        gt=-1.0,
        description="Return applied to the current price to derive the default target"
    )

    def max_age(self, kind: RecordKind) -> timedelta:
        """Staleness threshold for a record kind."""
        if kind == RecordKind.CURRENT_PRICE:
            return timedelta(hours=self.current_price_max_age_hours)
        return timedelta(hours=self.price_history_max_age_hours)
