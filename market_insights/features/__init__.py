"""Period keys, aggregation and derived KPIs."""
from .periods import truncate_date, period_key_fn, record_period_key
from .aggregation import PeriodAggregate, aggregate_periods, aggregate_frame
from .derived import DerivedSummary, derive_summary, summarize_periods, derive_frame, safe_divide
