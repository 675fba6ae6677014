"""
Unit tests for the persistent record store.
"""

import json
import pytest
import tempfile
import shutil
from datetime import datetime
from pathlib import Path

from bell_curve.exceptions import NotFound
from bell_curve.persistence import CacheRecord, RecordKind, RecordStore


PAYLOAD = "timestamp,open,high,low,close,volume\n2024-01-02,1,2,0.5,1.5,100\n"


class TestRecordStore:
    """Test RecordStore class."""

    @pytest.fixture
    def temp_cache_dir(self):
        """Create a temporary cache directory for testing."""
        temp_dir = tempfile.mkdtemp()
        yield temp_dir
        shutil.rmtree(temp_dir)

    def test_initialization(self, temp_cache_dir):
        """Test RecordStore initialization."""
        store = RecordStore(cache_dir=temp_cache_dir)
        assert store.cache_dir == Path(temp_cache_dir)

    def test_default_cache_dir(self):
        """Test RecordStore initialization with default cache directory."""
        store = RecordStore()
        expected_path = Path.home() / ".bell_curve" / "price_cache"
        assert store.cache_dir == expected_path

    def test_read_missing_record(self, temp_cache_dir):
        """Test that reading an absent record raises NotFound."""
        store = RecordStore(cache_dir=temp_cache_dir)

        with pytest.raises(NotFound):
            store.read("SPY", RecordKind.PRICE_HISTORY)

    def test_write_and_read(self, temp_cache_dir):
        """Test that a written payload is read back verbatim."""
        store = RecordStore(cache_dir=temp_cache_dir)
        fetched_at = datetime(2024, 1, 2, 16, 30)

        written = store.write("spy", RecordKind.PRICE_HISTORY, PAYLOAD, fetched_at=fetched_at)
        record = store.read("SPY", RecordKind.PRICE_HISTORY)

        assert written == record
        assert record.ticker == "SPY"
        assert record.kind == RecordKind.PRICE_HISTORY
        assert record.fetched_at == fetched_at
        assert record.payload == PAYLOAD

    def test_records_keyed_by_kind(self, temp_cache_dir):
        """Test that each kind is stored independently for a ticker."""
        store = RecordStore(cache_dir=temp_cache_dir)

        store.write("SPY", RecordKind.PRICE_HISTORY, "history")
        store.write("SPY", RecordKind.CURRENT_PRICE, "current")

        assert store.read("SPY", RecordKind.PRICE_HISTORY).payload == "history"
        assert store.read("SPY", RecordKind.CURRENT_PRICE).payload == "current"
        assert store.get_record_path("SPY", RecordKind.PRICE_HISTORY).parent == Path(temp_cache_dir) / "SPY"

    def test_write_overwrites(self, temp_cache_dir):
        """Test that a second write replaces the previous record."""
        store = RecordStore(cache_dir=temp_cache_dir)

        store.write("SPY", RecordKind.PRICE_HISTORY, "old", fetched_at=datetime(2024, 1, 1))
        store.write("SPY", RecordKind.PRICE_HISTORY, "new", fetched_at=datetime(2024, 1, 2))

        record = store.read("SPY", RecordKind.PRICE_HISTORY)
        assert record.payload == "new"
        assert record.fetched_at == datetime(2024, 1, 2)
        assert list(store.get_namespace_path("SPY").glob("*.tmp")) == []

    def test_ensure_namespace_idempotent(self, temp_cache_dir):
        """Test that creating an existing namespace is not an error."""
        store = RecordStore(cache_dir=temp_cache_dir)

        first = store.ensure_namespace("aapl")
        second = store.ensure_namespace("AAPL")

        assert first == second
        assert first.is_dir()
        assert first.name == "AAPL"

    def test_corrupted_record_moved_aside(self, temp_cache_dir):
        """Test that a corrupted record is treated as absent and preserved."""
        store = RecordStore(cache_dir=temp_cache_dir)
        store.ensure_namespace("SPY")
        record_file = store.get_record_path("SPY", RecordKind.PRICE_HISTORY)
        record_file.write_text("{ not json", encoding="utf-8")

        with pytest.raises(NotFound):
            store.read("SPY", RecordKind.PRICE_HISTORY)

        assert not record_file.exists()
        assert len(list(record_file.parent.glob("priceHistory.corrupted.*"))) == 1

    def test_undecodable_record_moved_aside(self, temp_cache_dir):
        """Test that a record that is not valid UTF-8 is treated as corrupted."""
        store = RecordStore(cache_dir=temp_cache_dir)
        store.ensure_namespace("SPY")
        record_file = store.get_record_path("SPY", RecordKind.PRICE_HISTORY)
        record_file.write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(NotFound):
            store.read("SPY", RecordKind.PRICE_HISTORY)

        assert not record_file.exists()
        assert len(list(record_file.parent.glob("priceHistory.corrupted.*"))) == 1

    def test_invalid_record_shape_moved_aside(self, temp_cache_dir):
        """Test that valid JSON with a wrong shape is treated as corrupted."""
        store = RecordStore(cache_dir=temp_cache_dir)
        store.ensure_namespace("SPY")
        record_file = store.get_record_path("SPY", RecordKind.CURRENT_PRICE)
        record_file.write_text(json.dumps({"ticker": "SPY"}), encoding="utf-8")

        with pytest.raises(NotFound):
            store.read("SPY", RecordKind.CURRENT_PRICE)

        assert not record_file.exists()

    def test_record_file_format(self, temp_cache_dir):
        """Test that records are stored as JSON with the payload verbatim."""
        store = RecordStore(cache_dir=temp_cache_dir)
        store.write("SPY", RecordKind.CURRENT_PRICE, PAYLOAD, fetched_at=datetime(2024, 1, 2))

        with open(store.get_record_path("SPY", RecordKind.CURRENT_PRICE), encoding="utf-8") as f:
            data = json.load(f)

        assert data["kind"] == "currentPrice"
        assert data["payload"] == PAYLOAD
        assert CacheRecord.model_validate(data).fetched_at == datetime(2024, 1, 2)

    def test_cache_info(self, temp_cache_dir):
        """Test cache information retrieval."""
        store = RecordStore(cache_dir=temp_cache_dir)

        info = store.get_cache_info("spy")
        assert info["ticker"] == "SPY"
        assert info["cached"] is False
        assert info["records"]["priceHistory"] == {"cached": False}

        store.write("SPY", RecordKind.PRICE_HISTORY, PAYLOAD, fetched_at=datetime(2024, 1, 2))

        info = store.get_cache_info("SPY")
        assert info["cached"] is True
        assert info["records"]["priceHistory"]["cached"] is True
        assert info["records"]["priceHistory"]["fetched_at"] == "2024-01-02T00:00:00"
        assert info["records"]["priceHistory"]["payload_lines"] == 2
        assert info["records"]["currentPrice"]["cached"] is False
