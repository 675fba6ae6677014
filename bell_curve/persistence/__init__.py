"""
Persistence module for cached price records.

This module stores the raw payloads fetched from the remote price source,
one record per ticker and record kind, with corruption recovery.
"""

from .models import CacheRecord, RecordKind
from .record_store import RecordStore

__all__ = ["CacheRecord", "RecordKind", "RecordStore"]
