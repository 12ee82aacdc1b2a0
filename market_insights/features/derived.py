"""
Derived metric calculation: ADR, occupancy and RevPAR from period sums.

Division-by-zero policy: a zero denominator yields 0, never NaN, Infinity or
an error. A period with zero capacity reports zero occupancy and RevPAR.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

from market_insights.data.normalizer import MetricRecord
from market_insights.features.aggregation import PeriodAggregate, aggregate_periods
from market_insights.features.periods import PeriodKeyFn


@dataclass(frozen=True)
class DerivedSummary:
    """Per-period KPI snapshot consumed read-only by presentation."""
    period_key: str
    adr: float
    occupancy: float  # fraction, presentation multiplies by 100
    revpar: float
    total_revenue: float
    rooms_sold: float
    capacity: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'period_key': self.period_key,
            'adr': self.adr,
            'occupancy': self.occupancy,
            'revpar': self.revpar,
            'total_revenue': self.total_revenue,
            'rooms_sold': self.rooms_sold,
            'capacity': self.capacity,
        }


def safe_divide(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the denominator is not positive."""
    return numerator / denominator if denominator > 0 else 0.0


def derive_summary(aggregate: PeriodAggregate) -> DerivedSummary:
    """
    Compute ADR, occupancy and RevPAR for one period.

    - adr = weighted_revenue_for_adr / sum_rooms_sold
    - occupancy = sum_rooms_sold / sum_capacity
    - revpar = sum_revenue / sum_capacity
    """
    return DerivedSummary(
        period_key=aggregate.period_key,
        adr=safe_divide(aggregate.weighted_revenue_for_adr, aggregate.sum_rooms_sold),
        occupancy=safe_divide(aggregate.sum_rooms_sold, aggregate.sum_capacity),
        revpar=safe_divide(aggregate.sum_revenue, aggregate.sum_capacity),
        total_revenue=aggregate.sum_revenue,
        rooms_sold=aggregate.sum_rooms_sold,
        capacity=aggregate.sum_capacity,
    )


def summarize_periods(
    records: Iterable[MetricRecord],
    key_fn: Optional[PeriodKeyFn] = None
) -> List[DerivedSummary]:
    """
    Aggregate records and derive one summary per non-empty period.

    Periods only exist once a record falls into them, so empty periods are
    omitted rather than reported as zeros.

    Returns:
        DerivedSummary list sorted by period_key
    """
    aggregates = aggregate_periods(records, key_fn)
    return [derive_summary(aggregates[key]) for key in sorted(aggregates)]


def derive_frame(agg: pd.DataFrame) -> pd.DataFrame:
    """
    Vectorised derive_summary over an aggregate_frame() result.

    Adds adr, occupancy and revpar columns (0 at zero denominator).
    """
    out = agg.copy()
    sold = out['sum_rooms_sold'].astype(float).to_numpy()
    capacity = out['sum_capacity'].astype(float).to_numpy()
    revenue = out['sum_revenue'].astype(float).to_numpy()
    weighted = out['weighted_revenue_for_adr'].astype(float).to_numpy()

    with np.errstate(divide='ignore', invalid='ignore'):
        out['adr'] = np.where(sold > 0, weighted / sold, 0.0)
        out['occupancy'] = np.where(capacity > 0, sold / capacity, 0.0)
        out['revpar'] = np.where(capacity > 0, revenue / capacity, 0.0)

    return out
