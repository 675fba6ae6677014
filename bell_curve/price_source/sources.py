"""
Remote price sources returning daily OHLCV series as raw payloads.

All source-specific details are confined here; the retrieval cache depends
only on PriceSource.fetch.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

from ..config.models import BellCurveConfig
from ..exceptions import NotFound, SourceUnavailable
from ..persistence.models import RecordKind
from .payload import frame_to_payload


logger = logging.getLogger(__name__)


class PriceSource(ABC):
    """Capability to fetch a daily price series for a ticker."""

    @abstractmethod
    def fetch(self, ticker: str, kind: RecordKind) -> str:
        """
        Fetch the raw payload for a ticker.

        Raises:
            NotFound: If the source has no data for the ticker
            SourceUnavailable: On network or HTTP failure
        """


class YFinancePriceSource(PriceSource):
    """Fetches daily price series from Yahoo Finance via yfinance."""

    CURRENT_PRICE_PERIOD = "5d"

    def __init__(self, history_period: str = "1y", timeout: float = 10.0):
        self.history_period = history_period
        self.timeout = timeout
        self._yf = None

    def _get_yfinance(self):
        """Lazy import of yfinance to avoid SSL issues during package setup."""
        if self._yf is None:
            import yfinance as yf
            self._yf = yf
        return self._yf

    def fetch(self, ticker: str, kind: RecordKind) -> str:
        period = self.CURRENT_PRICE_PERIOD if kind == RecordKind.CURRENT_PRICE else self.history_period
        logger.debug(f"Fetching {kind.value} for {ticker} from yfinance (period={period})")

        try:
            yf = self._get_yfinance()
            stock = yf.Ticker(ticker)
            data = stock.history(period=period, interval="1d", timeout=self.timeout)
        except Exception as e:
            raise SourceUnavailable(f"yfinance request for {ticker} failed: {e}") from e

        if data is None or data.empty:
            raise NotFound(f"No price data available for {ticker}")

        return frame_to_payload(data)


class HttpPriceSource(PriceSource):
    """Fetches daily price series from an HTTP daily-series endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()

    def fetch(self, ticker: str, kind: RecordKind) -> str:
        url = f"{self.base_url}/{kind.value}"
        params = {"symbol": ticker}
        if self.api_key:
            params["apikey"] = self.api_key

        logger.debug(f"GET {url} symbol={ticker}")

        try:
            resp = self._session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise SourceUnavailable(f"Request for {ticker} timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise SourceUnavailable(f"Request for {ticker} failed: {e}") from e

        if resp.status_code == 404:
            raise NotFound(f"No {kind.value} data available for {ticker}")

        if resp.status_code != 200:
            raise SourceUnavailable(f"Error: {resp.status_code} fetching {kind.value} for {ticker}")

        if not resp.text.strip():
            raise NotFound(f"No {kind.value} data available for {ticker}")

        return resp.text


def build_price_source(config: BellCurveConfig) -> PriceSource:
    """Create the price source selected by the configuration."""
    if config.price_source == "http":
        return HttpPriceSource(
            base_url=config.api_base_url,
            api_key=config.api_key,
            timeout=config.fetch_timeout_seconds
        )
    return YFinancePriceSource(
        history_period=config.history_period,
        timeout=config.fetch_timeout_seconds
    )
