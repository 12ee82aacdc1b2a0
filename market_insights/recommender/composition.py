"""
Comp-set composition breakdown (quality tier x neighborhood).

Buckets a competitor list into nested category -> neighborhood counts plus
room totals for the stacked composition charts. Competitors with a missing
or blank category/neighborhood go to an 'Unknown' bucket instead of being
dropped, so per-category property counts always sum to the competitor count.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping

import pandas as pd

from market_insights.config import UNKNOWN_BUCKET
from market_insights.data.normalizer import to_number
from market_insights.errors import InvalidInputError


@dataclass
class CategoryBreakdown:
    """Counts for one quality tier."""
    properties: int = 0
    rooms: float = 0
    neighborhoods: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'properties': self.properties,
            'rooms': self.rooms,
            'neighborhoods': dict(self.neighborhoods),
        }


@dataclass
class CompositionBreakdown:
    """Comp-set composition consumed by the composition card."""
    total_competitors: int = 0
    total_rooms: float = 0
    categories: Dict[str, CategoryBreakdown] = field(default_factory=dict)
    neighborhoods: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'total_competitors': self.total_competitors,
            'total_rooms': self.total_rooms,
            'categories': {name: c.to_dict() for name, c in self.categories.items()},
            'neighborhoods': dict(self.neighborhoods),
        }


def _field(competitor: Any, name: str) -> Any:
    if isinstance(competitor, Mapping):
        return competitor.get(name)
    return getattr(competitor, name, None)


def _label(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return UNKNOWN_BUCKET
    label = str(value).strip()
    return label or UNKNOWN_BUCKET


def _rooms(value: Any) -> float:
    rooms = to_number(value)
    return int(rooms) if float(rooms).is_integer() else rooms


def build_composition(competitors: Iterable[Any]) -> CompositionBreakdown:
    """
    Bucket competitors by category and neighborhood in a single pass.

    Args:
        competitors: list/tuple of mappings or objects with category,
            neighborhood and rooms; a DataFrame is read row by row

    Returns:
        CompositionBreakdown with totals and nested counts

    Raises:
        InvalidInputError: if competitors is not a list, tuple or DataFrame
    """
    if isinstance(competitors, pd.DataFrame):
        competitors = competitors.to_dict('records')
    if not isinstance(competitors, (list, tuple)):
        raise InvalidInputError(
            f"Competitors must be a list, got {type(competitors).__name__}"
        )

    breakdown = CompositionBreakdown()

    for competitor in competitors:
        category = _label(_field(competitor, 'category'))
        neighborhood = _label(_field(competitor, 'neighborhood'))
        rooms = _rooms(_field(competitor, 'rooms'))

        breakdown.total_competitors += 1
        breakdown.total_rooms += rooms

        bucket = breakdown.categories.get(category)
        if bucket is None:
            bucket = breakdown.categories[category] = CategoryBreakdown()
        bucket.properties += 1
        bucket.rooms += rooms
        bucket.neighborhoods[neighborhood] = bucket.neighborhoods.get(neighborhood, 0) + 1

        breakdown.neighborhoods[neighborhood] = breakdown.neighborhoods.get(neighborhood, 0) + 1

    return breakdown
