"""Stateless presentation helpers (formatting metadata, chart colours)."""
from .formatting import MetricFormat, METRIC_FORMATS, format_metric, metric_label
from .palette import (
    QUALITY_TIER_COLORS,
    NEIGHBORHOOD_PALETTE,
    string_hash,
    string_to_color,
    category_color,
    neighborhood_colors,
)
