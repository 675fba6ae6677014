"""
Price source module for fetching daily price series.

This module handles price data retrieval from yfinance or an HTTP endpoint
and the payload format used to store and parse the fetched series.
"""

from .payload import parse_payload, frame_to_payload
from .sources import PriceSource, YFinancePriceSource, HttpPriceSource, build_price_source

__all__ = [
    "PriceSource",
    "YFinancePriceSource",
    "HttpPriceSource",
    "build_price_source",
    "parse_payload",
    "frame_to_payload",
]
