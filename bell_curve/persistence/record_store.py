"""
Record store for persisting raw price payloads keyed by ticker and kind.
"""

import json
import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any

from pydantic import ValidationError

from ..exceptions import NotFound
from .models import CacheRecord, RecordKind

logger = logging.getLogger(__name__)


class RecordStore:
    """Stores one cache record per (ticker, kind) with corruption recovery."""

    RECORD_SUFFIX = ".json"

    def __init__(self, cache_dir: Optional[str] = None):
        """
        Initialize record store with specified directory.

        Args:
            cache_dir: Directory for record files. If None, uses default location.
        """
        if cache_dir is None:
            cache_dir = os.path.join(os.path.expanduser("~"), ".bell_curve", "price_cache")

        self._cache_dir = Path(cache_dir)
        self._cache_dir.mkdir(parents=True, exist_ok=True)

        logger.debug(f"RecordStore initialized with directory: {self._cache_dir}")

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def get_namespace_path(self, ticker: str) -> Path:
        """Get the directory holding all records for a ticker."""
        return self._cache_dir / ticker.upper()

    def get_record_path(self, ticker: str, kind: RecordKind) -> Path:
        """Get the file path of the record for a ticker and kind."""
        return self.get_namespace_path(ticker) / f"{kind.value}{self.RECORD_SUFFIX}"

    def ensure_namespace(self, ticker: str) -> Path:
        """Create the ticker directory if it does not already exist."""
        namespace = self.get_namespace_path(ticker)
        namespace.mkdir(parents=True, exist_ok=True)
        return namespace

    def read(self, ticker: str, kind: RecordKind) -> CacheRecord:
        """
        Read the stored record for a ticker and kind.

        Args:
            ticker: Stock ticker symbol
            kind: Kind of record to read

        Returns:
            The stored CacheRecord

        Raises:
            NotFound: If no valid record is stored
        """
        record_file = self.get_record_path(ticker, kind)

        if not record_file.exists():
            raise NotFound(f"No {kind.value} record stored for {ticker.upper()}")

        try:
            with open(record_file, 'r', encoding='utf-8') as f:
                record = CacheRecord.model_validate(json.load(f))

        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            logger.error(f"Invalid record file {record_file}: {e}")
            self._handle_corrupted_file(record_file)
            raise NotFound(f"Stored {kind.value} record for {ticker.upper()} was corrupted") from e

        logger.debug(f"Loaded {kind.value} record for {record.ticker} fetched at {record.fetched_at}")
        return record

    def write(
        self,
        ticker: str,
        kind: RecordKind,
        payload: str,
        fetched_at: Optional[datetime] = None
    ) -> CacheRecord:
        """
        Write a raw payload for a ticker and kind, replacing any previous record.

        Args:
            ticker: Stock ticker symbol
            kind: Kind of record to write
            payload: Raw payload, stored verbatim
            fetched_at: Fetch timestamp (defaults to now)

        Returns:
            The written CacheRecord
        """
        record = CacheRecord(
            ticker=ticker.upper(),
            kind=kind,
            fetched_at=fetched_at or datetime.now(),
            payload=payload
        )

        self.ensure_namespace(ticker)
        record_file = self.get_record_path(ticker, kind)

        # Write to a temporary file first, then atomically replace
        temp_file = record_file.with_suffix('.tmp')
        with open(temp_file, 'w', encoding='utf-8') as f:
            f.write(record.model_dump_json(indent=2))
        temp_file.replace(record_file)

        logger.info(f"Saved {kind.value} record for {record.ticker} to {record_file}")
        return record

    def _handle_corrupted_file(self, file_path: Path) -> None:
        """
        Move a corrupted record file aside so the next retrieval refetches.

        Args:
            file_path: Path to the corrupted file
        """
        try:
            corrupted_backup = file_path.with_suffix(f'.corrupted.{datetime.now().strftime("%Y%m%d_%H%M%S")}')
            shutil.move(file_path, corrupted_backup)
            logger.warning(f"Moved corrupted record file to {corrupted_backup}")
        except OSError as e:
            logger.error(f"Failed to move corrupted file {file_path}: {e}")

    def get_cache_info(self, ticker: str) -> Dict[str, Any]:
        """
        Get information about stored records for a ticker.

        Args:
            ticker: Stock ticker symbol

        Returns:
            Dictionary with cache information per record kind
        """
        ticker = ticker.upper()
        records = {}

        for kind in RecordKind:
            try:
                record = self.read(ticker, kind)
            except NotFound:
                records[kind.value] = {'cached': False}
                continue

            records[kind.value] = {
                'cached': True,
                'fetched_at': record.fetched_at.isoformat(),
                'payload_lines': len(record.payload.splitlines())
            }

        return {
            'ticker': ticker,
            'cached': any(info['cached'] for info in records.values()),
            'records': records
        }
