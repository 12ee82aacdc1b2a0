"""
Period bucketing keys.

Equivalent to DATE_TRUNC('day' | 'week' | 'month', stay_date): every key is
the ISO date of the bucket start, so keys sort chronologically as strings.
Weeks start on Monday.
"""

import logging
from typing import Callable

import pandas as pd

from market_insights.config import (
    GRANULARITIES,
    GRANULARITY_DAILY,
    GRANULARITY_MONTHLY,
    GRANULARITY_WEEKLY,
)
from market_insights.data.normalizer import MetricRecord
from market_insights.errors import InvalidInputError

logger = logging.getLogger(__name__)

PeriodKeyFn = Callable[[MetricRecord], str]


def truncate_date(value: str, granularity: str) -> str:
    """
    Truncate a date string to the start of its period.

    Unparseable values are returned verbatim; date validation belongs to
    whoever produced the rows.

    Args:
        value: Date string (e.g. '2025-03-14')
        granularity: 'daily', 'weekly' or 'monthly'

    Returns:
        ISO date string of the period start
    """
    if granularity not in GRANULARITIES:
        raise InvalidInputError(f"Unknown granularity {granularity!r}; expected one of {GRANULARITIES}")

    ts = pd.to_datetime(value, errors='coerce')
    if ts is None or pd.isna(ts):
        logger.debug(f"Unparseable period key {value!r}, keeping it verbatim")
        return value

    ts = ts.normalize()
    if granularity == GRANULARITY_WEEKLY:
        ts = ts - pd.Timedelta(days=ts.weekday())
    elif granularity == GRANULARITY_MONTHLY:
        ts = ts.replace(day=1)

    return ts.strftime('%Y-%m-%d')


def period_key_fn(granularity: str = GRANULARITY_DAILY) -> PeriodKeyFn:
    """Build a grouping function mapping a record to its period key."""
    if granularity not in GRANULARITIES:
        raise InvalidInputError(f"Unknown granularity {granularity!r}; expected one of {GRANULARITIES}")

    def key(record: MetricRecord) -> str:
        return truncate_date(record.period_key, granularity)

    return key


def record_period_key(record: MetricRecord) -> str:
    """Identity grouping: the record's own period key."""
    return record.period_key
