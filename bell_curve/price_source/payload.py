"""
Line-oriented CSV payload format shared by price sources and the retrieval cache.

A payload starts with a header line followed by one line per trading day:

    timestamp,open,high,low,close,volume
    2024-01-02,187.15,188.44,183.89,185.64,82488700

Timestamps are ISO-8601 strings or epoch milliseconds (at least 10 digits).
"""

import logging
import math
from datetime import datetime
from typing import Dict, List

import pandas as pd

from ..exceptions import ParseError
from ..models import PricePoint


logger = logging.getLogger(__name__)

HEADER = "timestamp,open,high,low,close,volume"
FIELD_COUNT = 6
FRAME_COLUMNS = ["Open", "High", "Low", "Close", "Volume"]
EPOCH_MS_MIN_DIGITS = 10


def frame_to_payload(data: pd.DataFrame) -> str:
    """
    Render an OHLCV DataFrame indexed by date as a payload.

    Args:
        data: DataFrame with Open, High, Low, Close and Volume columns

    Returns:
        Payload text including the header line
    """
    frame = data[FRAME_COLUMNS].copy()
    index = pd.DatetimeIndex(frame.index)
    if index.tz is not None:
        index = index.tz_localize(None)
    frame.index = index

    lines = [HEADER]
    for timestamp, row in frame.iterrows():
        lines.append(
            f"{timestamp.strftime('%Y-%m-%d')},{row['Open']},{row['High']},"
            f"{row['Low']},{row['Close']},{row['Volume']}"
        )
    return "\n".join(lines) + "\n"


def _parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 string or epoch milliseconds into a naive UTC datetime.

    Digit strings shorter than EPOCH_MS_MIN_DIGITS are basic-format ISO dates (20240102).
    """
    try:
        if value.replace('.', '', 1).isdigit() and len(value.split('.')[0]) >= EPOCH_MS_MIN_DIGITS:
            timestamp = pd.to_datetime(float(value), unit='ms')
        else:
            timestamp = pd.Timestamp(value)
    except (ValueError, OverflowError) as e:
        raise ParseError(f"Invalid timestamp: {value!r}") from e

    if pd.isna(timestamp):
        raise ParseError(f"Invalid timestamp: {value!r}")

    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert('UTC').tz_localize(None)
    return timestamp.to_pydatetime()


def _parse_number(value: str, field: str) -> float:
    try:
        number = float(value)
    except ValueError as e:
        raise ParseError(f"Invalid {field} value: {value!r}") from e

    if not math.isfinite(number):
        raise ParseError(f"Non-finite {field} value: {value!r}")
    return number


def parse_payload(payload: str) -> List[PricePoint]:
    """
    Parse a payload into price points in ascending timestamp order.

    The header line is discarded and lines that do not split into exactly
    six fields are dropped. Duplicate timestamps keep the last occurrence.

    Args:
        payload: Raw payload text

    Returns:
        List of PricePoint sorted by timestamp

    Raises:
        ParseError: If a well-formed line holds invalid values or no rows remain
    """
    lines = payload.splitlines()[1:]
    points: Dict[datetime, PricePoint] = {}
    dropped = 0

    for line in lines:
        fields = [field.strip() for field in line.split(',')]
        if len(fields) != FIELD_COUNT:
            dropped += 1
            continue

        timestamp = _parse_timestamp(fields[0])
        points[timestamp] = PricePoint(
            timestamp=timestamp,
            open=_parse_number(fields[1], 'open'),
            high=_parse_number(fields[2], 'high'),
            low=_parse_number(fields[3], 'low'),
            close=_parse_number(fields[4], 'close'),
            volume=_parse_number(fields[5], 'volume')
        )

    if dropped:
        logger.debug(f"Dropped {dropped} malformed payload lines")

    if not points:
        raise ParseError("Payload contains no price rows")

    return [points[timestamp] for timestamp in sorted(points)]
