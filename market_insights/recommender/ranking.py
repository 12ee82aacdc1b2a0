"""
Comp-set ranking for a single hotel.

Ranks one subject entity against its peers on a metric and reports:
- rank: 1-based competition rank (ties share the rank of the first
  occurrence, like SQL RANK(); no averaged ranks)
- total: number of ranked entities
- percentile: round((total - rank) / total * 100)
- band: top / middle / bottom third

Band thresholds (fixed, must match the dashboard cards):
| rank / total | band   |
|--------------|--------|
| <= 0.34      | top    |
| > 0.67       | bottom |
| otherwise    | middle |
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, Mapping, Optional, Sequence

import pandas as pd

from market_insights.config import (
    BAND_BOTTOM,
    BAND_MIDDLE,
    BAND_TOP,
    BOTTOM_BAND_MIN_RATIO,
    DEFAULT_COLUMNS,
    TOP_BAND_MAX_RATIO,
    ColumnMapping,
)
from market_insights.data.normalizer import normalize_frame
from market_insights.errors import InvalidInputError
from market_insights.features.aggregation import aggregate_frame
from market_insights.features.derived import derive_frame

logger = logging.getLogger(__name__)

# Metrics ranked by rank_market; higher is better for all three
MARKET_RANK_METRICS = ('occupancy', 'adr', 'revpar')


@dataclass(frozen=True)
class RankResult:
    """Position of one entity within its comp set."""
    rank: int
    total: int
    percentile: int
    band: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'rank': self.rank,
            'total': self.total,
            'percentile': self.percentile,
            'band': self.band,
        }


def classify_band(rank: int, total: int) -> str:
    """Tri-band classification of rank / total."""
    ratio = rank / total
    if ratio <= TOP_BAND_MAX_RATIO:
        return BAND_TOP
    if ratio > BOTTOM_BAND_MIN_RATIO:
        return BAND_BOTTOM
    return BAND_MIDDLE


def percentile_for(rank: int, total: int) -> int:
    """Percentile of a rank; halves round up (rank 1 of 100 -> 99)."""
    return int(math.floor((total - rank) / total * 100 + 0.5))


def make_rank_result(rank: int, total: int) -> RankResult:
    if total < 1:
        raise InvalidInputError("Cannot rank against an empty comp set")
    if not 1 <= rank <= total:
        raise InvalidInputError(f"rank must be in [1, {total}], got {rank}")
    return RankResult(
        rank=rank,
        total=total,
        percentile=percentile_for(rank, total),
        band=classify_band(rank, total),
    )


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


def rank_entity(
    subject_id: Hashable,
    values_by_entity: Mapping[Hashable, Optional[float]],
    higher_is_better: bool = True
) -> RankResult:
    """
    Rank one entity of a keyed comp set.

    Keys give identity, so an entity is counted once no matter how many peers
    share its value. Missing values (None/NaN) sort last in either direction.

    Args:
        subject_id: Key of the entity being ranked
        values_by_entity: Metric value per entity (subject included)
        higher_is_better: True for occupancy/ADR/RevPAR style metrics

    Returns:
        RankResult for the subject
    """
    total = len(values_by_entity)
    if total == 0:
        raise InvalidInputError("Cannot rank against an empty comp set")
    if subject_id not in values_by_entity:
        raise InvalidInputError(f"Subject {subject_id!r} is not part of the comp set")

    subject_value = values_by_entity[subject_id]
    present = [v for v in values_by_entity.values() if not _is_missing(v)]

    if _is_missing(subject_value):
        better = len(present)
    elif higher_is_better:
        better = sum(1 for v in present if v > subject_value)
    else:
        better = sum(1 for v in present if v < subject_value)

    return make_rank_result(better + 1, total)


def rank_value(
    subject_value: Optional[float],
    peer_values: Iterable[Optional[float]],
    higher_is_better: bool = True,
    includes_subject: bool = False
) -> RankResult:
    """
    Rank a bare value against a list of peer values.

    Args:
        subject_value: The subject's metric value
        peer_values: Peer metric values
        higher_is_better: Sort direction of the metric
        includes_subject: True if peer_values already contains the subject

    Returns:
        RankResult for the subject
    """
    entities: Dict[Hashable, Optional[float]] = {
        ('peer', i): value for i, value in enumerate(peer_values)
    }

    if includes_subject:
        matches = [
            key for key, value in entities.items()
            if value == subject_value or (_is_missing(value) and _is_missing(subject_value))
        ]
        if not matches:
            raise InvalidInputError(f"Subject value {subject_value!r} not found among peers")
        subject_key = matches[0]
    else:
        subject_key = ('subject',)
        entities[subject_key] = subject_value

    return rank_entity(subject_key, entities, higher_is_better)


def rank_market(
    rows: Sequence[Mapping[str, Any]],
    subject_id: Any,
    competitor_ids: Optional[Sequence[Any]] = None,
    columns: ColumnMapping = DEFAULT_COLUMNS
) -> Dict[str, RankResult]:
    """
    Rank a hotel against its comp set on occupancy, ADR and RevPAR.

    Each hotel's rows over the whole date range are aggregated first, so ADR
    is rooms-sold weighted per hotel. Comp-set hotels without rows rank last.
    A subject without rows is placed last on every metric.

    Args:
        rows: Raw metric rows for subject and competitors
        subject_id: Hotel being ranked
        competitor_ids: Comp set (default: every other hotel in rows)
        columns: Column layout of the rows

    Returns:
        Dict of metric name -> RankResult
    """
    subject = str(subject_id)
    frame = normalize_frame(pd.DataFrame(list(rows)), columns)

    if competitor_ids is None:
        hotel_ids = [h for h in frame['hotel_id'].dropna().unique().tolist() if h != subject]
    else:
        hotel_ids = [str(c) for c in competitor_ids if str(c) != subject]
    hotel_ids = [subject] + list(dict.fromkeys(hotel_ids))

    frame = frame[frame['hotel_id'].isin(hotel_ids)]
    per_hotel = derive_frame(aggregate_frame(frame, by='hotel_id')).set_index('hotel_id')

    total = len(hotel_ids)
    if subject not in per_hotel.index:
        logger.warning(f"No metric rows for hotel {subject}; ranking it last of {total}")
        last = make_rank_result(total, total)
        return {metric: last for metric in MARKET_RANK_METRICS}

    rankings = {}
    for metric in MARKET_RANK_METRICS:
        values = {
            hotel_id: float(per_hotel.at[hotel_id, metric]) if hotel_id in per_hotel.index else None
            for hotel_id in hotel_ids
        }
        rankings[metric] = rank_entity(subject, values, higher_is_better=True)
    return rankings
