"""Raw metric row normalization and snapshot loading."""
from .normalizer import (
    MetricRecord,
    to_number,
    to_optional_number,
    normalize_row,
    normalize_rows,
    normalize_frame,
    frame_to_records,
)
from .loader import load_snapshots, load_hotels, fetch_metric_rows, fetch_competitor_details
