"""
Display formatting for KPI values.

Field metadata lives in an immutable table that is passed into the formatter,
so callers can swap labels or precision without touching the engine.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

PERCENT = 'percent'
CURRENCY = 'currency'
NUMBER = 'number'


@dataclass(frozen=True)
class MetricFormat:
    """How one metric is labelled and rendered."""
    label: str
    kind: str
    decimals: int = 0


METRIC_FORMATS: Mapping[str, MetricFormat] = MappingProxyType({
    'occupancy': MetricFormat('Occupancy', PERCENT, 1),
    'adr': MetricFormat('ADR', CURRENCY, 2),
    'revpar': MetricFormat('RevPAR', CURRENCY, 2),
    'total_revenue': MetricFormat('Total Revenue', CURRENCY, 0),
    'rooms_sold': MetricFormat('Rooms Sold', NUMBER, 0),
    'capacity': MetricFormat('Capacity', NUMBER, 0),
})


def format_metric(
    name: str,
    value: Optional[float],
    formats: Mapping[str, MetricFormat] = METRIC_FORMATS,
    currency_symbol: str = '£'
) -> str:
    """
    Render a metric value for display.

    Occupancy is stored as a fraction and shown as a percentage. Unknown
    metric names fall back to a plain number with two decimals.

    Args:
        name: Metric name (key into formats)
        value: Raw value; None renders as '-'
        formats: Metric metadata table
        currency_symbol: Prefix for currency metrics

    Returns:
        Display string, e.g. '78.5%', '£133.33', '1,250'
    """
    if value is None:
        return '-'

    fmt = formats.get(name, MetricFormat(name, NUMBER, 2))
    if fmt.kind == PERCENT:
        return f"{value * 100:,.{fmt.decimals}f}%"
    if fmt.kind == CURRENCY:
        return f"{currency_symbol}{value:,.{fmt.decimals}f}"
    return f"{value:,.{fmt.decimals}f}"


def metric_label(name: str, formats: Mapping[str, MetricFormat] = METRIC_FORMATS) -> str:
    fmt = formats.get(name)
    return fmt.label if fmt is not None else name
