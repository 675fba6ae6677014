"""
Data models for persisted cache records.
"""

from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict


class RecordKind(str, Enum):
    """Kind of price data held in a cache record."""

    PRICE_HISTORY = "priceHistory"
    CURRENT_PRICE = "currentPrice"


class CacheRecord(BaseModel):
    """Raw payload fetched for a (ticker, kind) pair."""

    model_config = ConfigDict(validate_assignment=True)

    ticker: str
    kind: RecordKind
    fetched_at: datetime
    payload: str
