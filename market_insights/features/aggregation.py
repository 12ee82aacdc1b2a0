"""
Period aggregation of normalized metric records.

Key principle: ADR is revenue-weighted by rooms sold when several source rows
fall into one period. An arithmetic mean of per-row ADR misrepresents the
blended rate whenever row volumes differ:

    (adr=100, sold=10) + (adr=200, sold=5)  ->  (100*10 + 200*5) / 15 = 133.33
                                                 not (100 + 200) / 2 = 150

The aggregator therefore carries weighted_revenue_for_adr = sum(adr * sold)
and the derived calculator divides by total rooms sold.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import pandas as pd

from market_insights.data.normalizer import MetricRecord
from market_insights.features.periods import PeriodKeyFn, record_period_key


@dataclass
class PeriodAggregate:
    """Running sums for one period during a single aggregation pass."""
    period_key: str
    sum_revenue: float = 0.0
    sum_rooms_sold: float = 0.0
    sum_capacity: float = 0.0
    weighted_revenue_for_adr: float = 0.0
    record_count: int = 0

    def add(self, record: MetricRecord) -> None:
        self.sum_revenue += record.total_revenue
        self.sum_rooms_sold += record.rooms_sold
        self.sum_capacity += record.capacity_count
        self.weighted_revenue_for_adr += record.adr * record.rooms_sold
        self.record_count += 1

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'period_key': self.period_key,
            'sum_revenue': self.sum_revenue,
            'sum_rooms_sold': self.sum_rooms_sold,
            'sum_capacity': self.sum_capacity,
            'weighted_revenue_for_adr': self.weighted_revenue_for_adr,
            'record_count': self.record_count,
        }


def aggregate_periods(
    records: Iterable[MetricRecord],
    key_fn: Optional[PeriodKeyFn] = None
) -> Dict[str, PeriodAggregate]:
    """
    Group records by period and reduce them into sums.

    Pure reduction: sums are accumulated in input order, so the same input
    always produces bit-identical output.

    Args:
        records: Normalized metric records (any order)
        key_fn: Maps a record to its period key (default: record.period_key)

    Returns:
        Dict of period_key -> PeriodAggregate, in order of first appearance
    """
    if key_fn is None:
        key_fn = record_period_key

    aggregates: Dict[str, PeriodAggregate] = {}
    for record in records:
        key = key_fn(record)
        aggregate = aggregates.get(key)
        if aggregate is None:
            aggregate = aggregates[key] = PeriodAggregate(period_key=key)
        aggregate.add(record)
    return aggregates


def aggregate_frame(df: pd.DataFrame, by: str = 'period_key') -> pd.DataFrame:
    """
    Vectorised aggregation of a normalize_frame() result.

    Args:
        df: Normalized metrics frame
        by: Grouping column ('period_key', 'hotel_id', ...)

    Returns:
        DataFrame with columns [by, sum_revenue, sum_rooms_sold, sum_capacity,
        weighted_revenue_for_adr, record_count], groups in order of first appearance
    """
    if len(df) == 0:
        return pd.DataFrame(columns=[
            by, 'sum_revenue', 'sum_rooms_sold', 'sum_capacity',
            'weighted_revenue_for_adr', 'record_count'
        ])

    work = df.assign(weighted_revenue_for_adr=df['adr'] * df['rooms_sold'])
    grouped = work.groupby(by, sort=False, dropna=False).agg(
        sum_revenue=('total_revenue', 'sum'),
        sum_rooms_sold=('rooms_sold', 'sum'),
        sum_capacity=('capacity_count', 'sum'),
        weighted_revenue_for_adr=('weighted_revenue_for_adr', 'sum'),
        record_count=('adr', 'size'),
    )
    return grouped.reset_index()
