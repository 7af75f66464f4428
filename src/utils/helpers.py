"""
Helper Functions Module
Provides utility functions for the Equipment Maintenance Prioritization System
"""

import math
import re
import uuid
from datetime import datetime, date
from numbers import Number
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
import pandas as pd

# Day zero of spreadsheet serial dates (1900 date system, leap-year bug included)
SPREADSHEET_EPOCH = pd.Timestamp('1899-12-30')

# Serial numbers stored as text; longer digit runs are compact dates (YYYYMMDD)
SERIAL_TEXT = re.compile(r'\d{1,5}(\.\d+)?')

DateLike = Union[str, datetime, date, pd.Timestamp, Number]

# ========================================
# Value Cleaning Helpers
# ========================================

def is_missing(value: Any) -> bool:
    """Check whether a cell value should be treated as absent

    Args:
        value: Raw cell value (None, NaN, NaT, empty string...)

    Returns:
        True if the value carries no information
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def clean_text(value: Any) -> Optional[str]:
    """Convert a cell value to a stripped string, None when absent"""
    if is_missing(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def clean_identifier(value: Any) -> Optional[Union[int, float]]:
    """Convert an equipment identifier cell to a number, None when absent or not numeric"""
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, Number):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number

# ========================================
# Date/Time Helpers
# ========================================

def parse_order_date(value: Any) -> Optional[pd.Timestamp]:
    """Resolve a work order date cell to a naive timestamp

    Accepts spreadsheet serial numbers (days since 1899-12-30, fractional
    part truncated) as numbers or text, datetime objects and text dates.

    Args:
        value: Raw date cell

    Returns:
        Timestamp, or None if the value cannot be resolved
    """
    if is_missing(value) or isinstance(value, bool):
        return None

    try:
        if isinstance(value, (pd.Timestamp, datetime, date, np.datetime64)):
            timestamp = pd.Timestamp(value)
        elif isinstance(value, Number):
            timestamp = SPREADSHEET_EPOCH + pd.Timedelta(days=int(value))
        else:
            text = str(value).strip()
            if SERIAL_TEXT.fullmatch(text):
                timestamp = SPREADSHEET_EPOCH + pd.Timedelta(days=int(float(text)))
            else:
                timestamp = pd.to_datetime(text, errors='coerce')
    except (ValueError, OverflowError, pd.errors.OutOfBoundsDatetime):
        return None

    if timestamp is None or pd.isna(timestamp):
        return None

    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert('UTC').tz_localize(None)

    return timestamp


def whole_days_between(later: pd.Timestamp, earlier: pd.Timestamp) -> int:
    """Whole days from ``earlier`` to ``later``, rounded down (negative if reversed)"""
    return (later - earlier).days


def resolve_evaluation_instant(now: Optional[DateLike] = None) -> pd.Timestamp:
    """Fix the evaluation instant for a run

    Args:
        now: Explicit instant, or None for the current local time

    Returns:
        Naive timestamp used for every day-based window in the run
    """
    if now is None:
        return pd.Timestamp.now()

    instant = parse_order_date(now)
    if instant is None:
        raise ValueError(f"Could not resolve evaluation instant: {now!r}")
    return instant

# ========================================
# Misc Helpers
# ========================================

def generate_id(prefix: str = '') -> str:
    """Generate unique ID

    Args:
        prefix: Optional prefix

    Returns:
        Unique ID string
    """
    unique_id = str(uuid.uuid4())[:8]
    return f"{prefix}{unique_id}" if prefix else unique_id


def ensure_directory(path: Union[str, Path]) -> Path:
    """Ensure directory exists

    Args:
        path: Directory path
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path
