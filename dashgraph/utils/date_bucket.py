"""
Time bucketing for chart points

Turns whatever the dataset uses as a timestamp into the canonical bucket key
stored in each point's "month" field.

Accepted timestamp forms:
- datetime / date objects
- epoch seconds (int or float)
- compact digit strings: YYYYMMDD or YYYYMMDDHH (e.g. "2017010100")
- anything else dateutil can parse ("2024-01-15", "Jan 2024", ...)
"""

from datetime import datetime, date
from typing import Any, Optional
import re

import pytz
from dateutil import parser as date_parser
import structlog

from dashgraph.config.settings import Settings, resolve_settings

logger = structlog.get_logger(__name__)

COMPACT_TIMESTAMP = re.compile(r"^(\d{4})(\d{2})(\d{2})(\d{2})?$")


def to_datetime(timestamp: Any, tz: Optional[Any] = None) -> datetime:
    """
    Convert a dataset timestamp into an aware datetime in ``tz`` (default UTC).

    Raises:
        TypeError: unsupported timestamp type
        ValueError: unparseable timestamp string
        OverflowError, OSError: timestamp outside the platform datetime range
    """
    tz = tz or pytz.UTC

    if isinstance(timestamp, datetime):
        parsed = timestamp
    elif isinstance(timestamp, date):
        parsed = datetime(timestamp.year, timestamp.month, timestamp.day)
    elif isinstance(timestamp, bool):
        raise TypeError(f"Unsupported timestamp type: {type(timestamp).__name__}")
    elif isinstance(timestamp, (int, float)):
        return datetime.fromtimestamp(timestamp, tz=pytz.UTC).astimezone(tz)
    elif isinstance(timestamp, str):
        text = timestamp.strip()
        match = COMPACT_TIMESTAMP.match(text)
        if match:
            year, month, day, hour = match.groups()
            parsed = datetime(int(year), int(month), int(day), int(hour or 0))
        else:
            parsed = date_parser.parse(text)
    else:
        raise TypeError(f"Unsupported timestamp type: {type(timestamp).__name__}")

    if parsed.tzinfo is None:
        return tz.localize(parsed)
    return parsed.astimezone(tz)


def create_date(timestamp: Any, settings: Optional[Settings] = None) -> str:
    """
    Build the canonical time-bucket key for a timestamp.

    Args:
        timestamp: Dataset timestamp in any accepted form
        settings: Optional settings override (bucket format and timezone)

    Returns:
        Bucket key such as "2024-01"
    """
    settings = resolve_settings(settings)
    return to_datetime(timestamp, settings.tzinfo).strftime(settings.month_bucket_format)
