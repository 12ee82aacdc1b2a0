"""
Metric row normalization.

Raw rows come back from the analytics query API with mixed types: numbers,
numeric strings, empty strings, None and NaN. Every numeric field is coerced
with a single policy: anything that is not a finite number becomes 0. A metric
reported as missing must never poison a period sum with NaN.

No error is ever raised for a malformed row. The number of degraded rows is
logged at DEBUG level so data quality issues stay visible.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd

from market_insights.config import DEFAULT_COLUMNS, ColumnMapping

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = ('adr', 'rooms_sold', 'capacity_count', 'total_revenue')


@dataclass(frozen=True)
class MetricRecord:
    """One normalized per-stay-date metric row."""
    period_key: str
    adr: float
    rooms_sold: float
    capacity_count: float
    total_revenue: float
    occupancy: Optional[float] = None
    hotel_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'period_key': self.period_key,
            'hotel_id': self.hotel_id,
            'adr': self.adr,
            'rooms_sold': self.rooms_sold,
            'capacity_count': self.capacity_count,
            'total_revenue': self.total_revenue,
            'occupancy': self.occupancy,
        }


def to_optional_number(value: Any) -> Optional[float]:
    """Coerce a raw value to a finite float, or None if it is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not np.isfinite(number):
        return None
    return number


def to_number(value: Any) -> float:
    """Coerce a raw value to a float; None, junk strings, NaN and inf become 0."""
    number = to_optional_number(value)
    return 0.0 if number is None else number


def _is_scalar_missing(value: Any) -> bool:
    return value is None or (pd.api.types.is_scalar(value) and not isinstance(value, str) and pd.isna(value))


def _hotel_id(value: Any) -> Optional[str]:
    """Stringify a hotel id; integral floats (101.0 from a NaN-upcast column) become '101'."""
    if _is_scalar_missing(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _period_key(value: Any) -> str:
    if _is_scalar_missing(value):
        return ''
    if isinstance(value, str):
        return value
    # date/datetime/Timestamp coming from a typed query
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return str(value)


def normalize_row(row: Mapping[str, Any], columns: ColumnMapping = DEFAULT_COLUMNS) -> MetricRecord:
    """
    Convert one raw API row into a MetricRecord.

    Args:
        row: Mapping of column name to raw value
        columns: Column layout of the row

    Returns:
        MetricRecord with every numeric field coerced (missing -> 0)
    """
    return MetricRecord(
        period_key=_period_key(row.get(columns.period_key)),
        adr=to_number(row.get(columns.adr)),
        rooms_sold=to_number(row.get(columns.rooms_sold)),
        capacity_count=to_number(row.get(columns.capacity_count)),
        total_revenue=to_number(row.get(columns.total_revenue)),
        occupancy=to_optional_number(row.get(columns.occupancy)),
        hotel_id=_hotel_id(row.get(columns.hotel_id)),
    )


def _is_degraded(row: Mapping[str, Any], columns: ColumnMapping) -> bool:
    return any(
        to_optional_number(row.get(getattr(columns, name))) is None
        for name in NUMERIC_FIELDS
    )


def normalize_rows(
    rows: Iterable[Mapping[str, Any]],
    columns: ColumnMapping = DEFAULT_COLUMNS
) -> List[MetricRecord]:
    """Normalize a batch of raw rows, preserving input order."""
    records = []
    degraded = 0
    for row in rows:
        if _is_degraded(row, columns):
            degraded += 1
        records.append(normalize_row(row, columns))

    if degraded:
        logger.debug(f"{degraded} of {len(records)} metric rows had missing or non-numeric fields (coerced to 0)")
    return records


def _numeric_series(series: pd.Series) -> pd.Series:
    """Float column with NaN wherever to_optional_number would give None."""
    if pd.api.types.is_bool_dtype(series):
        return pd.Series(np.nan, index=series.index, dtype=float)
    if pd.api.types.is_numeric_dtype(series):
        values = pd.to_numeric(series, errors='coerce').astype(float)
    else:
        # mixed object columns (padded strings, bools, junk) go cell by cell
        values = series.map(to_optional_number).astype(float)
    return values.replace([np.inf, -np.inf], np.nan)


def normalize_frame(df: pd.DataFrame, columns: ColumnMapping = DEFAULT_COLUMNS) -> pd.DataFrame:
    """
    Vectorised normalization of a DataFrame of raw rows.

    Same policy as normalize_row. Missing columns are treated as all-missing.

    Returns:
        DataFrame with columns period_key, hotel_id, adr, rooms_sold,
        capacity_count, total_revenue, occupancy
    """
    out = pd.DataFrame(index=df.index)

    if columns.period_key in df.columns:
        out['period_key'] = df[columns.period_key].map(_period_key)
    else:
        out['period_key'] = ''

    if columns.hotel_id in df.columns:
        out['hotel_id'] = pd.Series(
            [_hotel_id(v) for v in df[columns.hotel_id].astype(object)],
            index=df.index, dtype=object,
        )
    else:
        out['hotel_id'] = None

    for name in NUMERIC_FIELDS:
        source = getattr(columns, name)
        if source in df.columns:
            out[name] = _numeric_series(df[source]).fillna(0.0)
        else:
            out[name] = 0.0

    if columns.occupancy in df.columns:
        occ = _numeric_series(df[columns.occupancy])
        # object dtype so missing stays None instead of NaN
        out['occupancy'] = pd.Series(
            [None if pd.isna(v) else float(v) for v in occ],
            index=df.index, dtype=object,
        )
    else:
        out['occupancy'] = None

    return out


def frame_to_records(df: pd.DataFrame) -> List[MetricRecord]:
    """Turn a normalize_frame() result into MetricRecords in row order."""
    return [
        MetricRecord(
            period_key=row['period_key'],
            adr=float(row['adr']),
            rooms_sold=float(row['rooms_sold']),
            capacity_count=float(row['capacity_count']),
            total_revenue=float(row['total_revenue']),
            occupancy=None if row['occupancy'] is None else float(row['occupancy']),
            hotel_id=row['hotel_id'],
        )
        for row in df.to_dict('records')
    ]
