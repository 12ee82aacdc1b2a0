"""
Configuration for the market insights engine.

Contains ranking band thresholds, bucketing labels, granularity names and the
default column layout of the daily metrics snapshot export.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


# =============================================================================
# RANKING BANDS
# =============================================================================

# rank / total at or below this is the top third (rank 34 of 100 is still top)
TOP_BAND_MAX_RATIO = 0.34

# rank / total above this is the bottom third (68+ of 100)
BOTTOM_BAND_MIN_RATIO = 0.67

BAND_TOP = 'top'
BAND_MIDDLE = 'middle'
BAND_BOTTOM = 'bottom'


# =============================================================================
# COMPOSITION
# =============================================================================

UNKNOWN_BUCKET = 'Unknown'


# =============================================================================
# PERIOD GRANULARITY
# =============================================================================

GRANULARITY_DAILY = 'daily'
GRANULARITY_WEEKLY = 'weekly'
GRANULARITY_MONTHLY = 'monthly'

GRANULARITIES = (GRANULARITY_DAILY, GRANULARITY_WEEKLY, GRANULARITY_MONTHLY)


# =============================================================================
# RAW ROW LAYOUT
# =============================================================================

@dataclass(frozen=True)
class ColumnMapping:
    """Column names of a raw metric row as returned by the analytics API."""
    period_key: str = 'stay_date'
    adr: str = 'adr'
    rooms_sold: str = 'rooms_sold'
    capacity_count: str = 'capacity_count'
    total_revenue: str = 'total_revenue'
    occupancy: str = 'occupancy'
    hotel_id: str = 'hotel_id'


DEFAULT_COLUMNS = ColumnMapping()


@dataclass
class InsightsConfig:
    """Configuration for one dashboard payload build."""
    subject_id: str
    competitor_ids: List[str] = field(default_factory=list)
    granularity: str = GRANULARITY_DAILY
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    columns: ColumnMapping = DEFAULT_COLUMNS
