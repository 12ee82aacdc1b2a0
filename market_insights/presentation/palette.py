"""
Deterministic colours for composition charts.

Quality tiers have fixed colours. Neighborhoods are open-ended, so each name
is hashed onto a small palette; the hash matches the dashboard's JavaScript
string hash (UTF-16 code units, 32-bit shift wraparound) so server-rendered
and browser-rendered charts agree.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Sequence

from market_insights.config import UNKNOWN_BUCKET

QUALITY_TIER_COLORS: Mapping[str, str] = MappingProxyType({
    'Luxury': '#faff6a',
    'Upper Midscale': '#10b981',
    'Midscale': '#6b7280',
    'Economy': '#4b5563',
    'Hostel': '#a855f7',
})

FALLBACK_COLOR = '#4b5563'

NEIGHBORHOOD_PALETTE: Sequence[str] = (
    '#3b82f6',  # blue
    '#ef4444',  # red
    '#f97316',  # orange
    '#84cc16',  # lime
    '#a855f7',  # purple
    '#eab308',  # yellow
    '#14b8a6',  # teal
)


def _to_int32(value: int) -> int:
    return (value + 2**31) % 2**32 - 2**31


def string_hash(text: str) -> int:
    """JavaScript `hash = c + ((hash << 5) - hash)` over UTF-16 code units."""
    encoded = text.encode('utf-16-le')
    h = 0
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = unit + (_to_int32(_to_int32(h) << 5) - h)
    return h


def palette_index(text: str, size: int = len(NEIGHBORHOOD_PALETTE)) -> int:
    """Stable palette slot for a string."""
    return abs(string_hash(text)) % size


def string_to_color(text: str, palette: Sequence[str] = NEIGHBORHOOD_PALETTE) -> str:
    return palette[palette_index(text, len(palette))]


def category_color(category: str, colors: Mapping[str, str] = QUALITY_TIER_COLORS) -> str:
    """Fixed tier colour, or the neutral fallback for unknown tiers."""
    return colors.get(category, FALLBACK_COLOR)


def neighborhood_colors(names: Iterable[str]) -> Dict[str, str]:
    """Colour map for the neighborhood section of a composition breakdown."""
    return {
        name: FALLBACK_COLOR if name == UNKNOWN_BUCKET else string_to_color(name)
        for name in names
    }
