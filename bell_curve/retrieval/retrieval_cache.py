"""
Cache-or-fetch retrieval of price series with graceful degradation to stale data.
"""

import logging
import threading
from concurrent.futures import Future
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

from ..config.models import BellCurveConfig
from ..exceptions import NotFound, SourceUnavailable
from ..persistence import CacheRecord, RecordKind, RecordStore
from ..price_source import PriceSource, parse_payload
from .models import PriceSeries


logger = logging.getLogger(__name__)


class RetrievalCache:
    """Serves stored price records while fresh and refetches them once stale."""

    def __init__(
        self,
        source: PriceSource,
        store: RecordStore,
        config: Optional[BellCurveConfig] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize the retrieval cache.

        Args:
            source: Remote price source
            store: Persistent record store
            config: Configuration holding the staleness thresholds
            clock: Returns the current time; used for staleness decisions
        """
        self.source = source
        self.store = store
        self.config = config or BellCurveConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._in_flight: Dict[Tuple[str, RecordKind], Future] = {}

    def retrieve(self, ticker: str, kind: RecordKind) -> PriceSeries:
        """
        Retrieve a price series, fetching only when no fresh record is stored.

        Concurrent calls for the same ticker and kind share one retrieval.

        Args:
            ticker: Stock ticker symbol
            kind: Kind of price data

        Returns:
            PriceSeries in ascending timestamp order

        Raises:
            NotFound: If nothing is stored and the source has no data
            SourceUnavailable: If nothing is stored and the fetch fails
            ParseError: If the fetched or stored payload is malformed
        """
        ticker = ticker.upper()
        key = (ticker, kind)

        with self._lock:
            future = self._in_flight.get(key)
            is_leader = future is None
            if is_leader:
                future = Future()
                self._in_flight[key] = future

        if not is_leader:
            logger.debug(f"Joining in-flight retrieval of {kind.value} for {ticker}")
            return future.result()

        try:
            series = self._retrieve(ticker, kind)
        except BaseException as e:
            # Joiners block on the future until it is resolved
            future.set_exception(e)
            raise
        else:
            future.set_result(series)
            return series
        finally:
            with self._lock:
                self._in_flight.pop(key, None)

    def is_stale(self, record: CacheRecord) -> bool:
        """Check whether a record is older than the threshold for its kind."""
        age = self._clock() - record.fetched_at
        return age > self.config.max_age(record.kind)

    def _retrieve(self, ticker: str, kind: RecordKind) -> PriceSeries:
        try:
            record = self.store.read(ticker, kind)
        except NotFound:
            logger.info(f"No cached {kind.value} for {ticker}, fetching from source")
            return self._fetch_and_store(ticker, kind)

        if not self.is_stale(record):
            logger.debug(f"Using cached {kind.value} for {ticker} fetched at {record.fetched_at}")
            return self._to_series(record)

        logger.info(f"Cached {kind.value} for {ticker} is stale (fetched at {record.fetched_at}), refreshing")
        try:
            return self._fetch_and_store(ticker, kind)
        except (SourceUnavailable, NotFound) as e:
            logger.warning(f"Refresh of {kind.value} for {ticker} failed, using stale data: {e}")
            return self._to_series(record, stale=True)

    def _fetch_and_store(self, ticker: str, kind: RecordKind) -> PriceSeries:
        payload = self.source.fetch(ticker, kind)
        fetched_at = self._clock()

        # Parse before storing so a malformed payload never replaces good data
        points = parse_payload(payload)

        try:
            self.store.write(ticker, kind, payload, fetched_at=fetched_at)
        except OSError as e:
            logger.warning(f"Failed to save {kind.value} record for {ticker}: {e}")

        return PriceSeries(ticker=ticker, kind=kind, fetched_at=fetched_at, points=points)

    def _to_series(self, record: CacheRecord, stale: bool = False) -> PriceSeries:
        return PriceSeries(
            ticker=record.ticker,
            kind=record.kind,
            fetched_at=record.fetched_at,
            points=parse_payload(record.payload),
            stale=stale
        )
