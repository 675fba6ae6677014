"""
Data models for retrieved price series.
"""

from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict

from ..models import PricePoint
from ..persistence.models import RecordKind


class PriceSeries(BaseModel):
    """Parsed price series for a ticker, tagged with the record kind."""

    model_config = ConfigDict(validate_assignment=True)

    ticker: str
    kind: RecordKind
    fetched_at: datetime
    points: List[PricePoint]
    stale: bool = False

    @property
    def latest_close(self) -> float:
        """Most recent closing price; the current price for CURRENT_PRICE series."""
        return self.points[-1].close
