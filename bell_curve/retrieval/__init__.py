"""
Retrieval module implementing the cache-or-fetch policy for price data.
"""

from .models import PriceSeries
from .retrieval_cache import RetrievalCache

__all__ = ["PriceSeries", "RetrievalCache"]
