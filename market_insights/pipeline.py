"""
End-to-end dashboard payload.

Logic:
1. Normalize raw rows for the subject hotel and its comp set
2. Summarize the subject's rows per period (own-hotel KPIs)
3. Summarize the comp set's rows per period as one market (market KPIs)
4. Rank the subject against the comp set on occupancy, ADR and RevPAR
5. Bucket the comp set's inventory into the composition breakdown

The engine steps are pure; only build_insights_from_db touches DuckDB.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import duckdb
import pandas as pd

from market_insights.config import InsightsConfig
from market_insights.data.loader import fetch_competitor_details, fetch_metric_rows
from market_insights.data.normalizer import normalize_rows
from market_insights.errors import InvalidInputError
from market_insights.features.derived import DerivedSummary, summarize_periods
from market_insights.features.periods import period_key_fn
from market_insights.recommender.composition import CompositionBreakdown, build_composition
from market_insights.recommender.ranking import MARKET_RANK_METRICS, RankResult, rank_market

logger = logging.getLogger(__name__)


@dataclass
class InsightsReport:
    """Everything the market insights page renders for one hotel."""
    subject_id: str
    granularity: str
    hotel_summaries: List[DerivedSummary] = field(default_factory=list)
    market_summaries: List[DerivedSummary] = field(default_factory=list)
    rankings: Dict[str, Optional[RankResult]] = field(default_factory=dict)
    composition: CompositionBreakdown = field(default_factory=CompositionBreakdown)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'subject_id': self.subject_id,
            'granularity': self.granularity,
            'hotel': [s.to_dict() for s in self.hotel_summaries],
            'market': [s.to_dict() for s in self.market_summaries],
            'rankings': {
                metric: None if result is None else result.to_dict()
                for metric, result in self.rankings.items()
            },
            'composition': self.composition.to_dict(),
        }


def build_insights(
    rows: Sequence[Mapping[str, Any]],
    competitors: Union[Sequence[Any], pd.DataFrame],
    config: InsightsConfig
) -> InsightsReport:
    """
    Build the insights payload from already-fetched data.

    Args:
        rows: Raw metric rows for the subject and every comp-set hotel
        competitors: Comp-set inventory (category, neighborhood, rooms) as a
            list of mappings or a DataFrame
        config: Subject, comp set ids, granularity and column layout

    Returns:
        InsightsReport; a metric whose ranking is impossible is reported as None
    """
    subject = str(config.subject_id)
    competitor_ids = {str(c) for c in config.competitor_ids} - {subject}
    key_fn = period_key_fn(config.granularity)

    records = normalize_rows(rows, config.columns)
    hotel_records = [r for r in records if r.hotel_id == subject]
    market_records = [r for r in records if r.hotel_id in competitor_ids]

    logger.info(
        f"Building insights for hotel {subject}: {len(hotel_records)} own rows, "
        f"{len(market_records)} comp-set rows across {len(competitor_ids)} competitors"
    )

    report = InsightsReport(subject_id=subject, granularity=config.granularity)
    report.hotel_summaries = summarize_periods(hotel_records, key_fn)
    report.market_summaries = summarize_periods(market_records, key_fn)

    try:
        report.rankings = rank_market(
            rows, subject, competitor_ids=sorted(competitor_ids), columns=config.columns
        )
    except InvalidInputError as exc:
        logger.warning(f"Insufficient data to rank hotel {subject}: {exc}")
        report.rankings = {metric: None for metric in MARKET_RANK_METRICS}

    report.composition = build_composition(competitors)
    return report


def build_insights_from_db(con: duckdb.DuckDBPyConnection, config: InsightsConfig) -> InsightsReport:
    """
    Fetch rows and comp-set details from DuckDB, then build_insights.

    Expects daily_metrics_snapshots and hotels tables (see data.loader).
    """
    hotel_ids = [str(config.subject_id)] + [str(c) for c in config.competitor_ids]
    rows = fetch_metric_rows(con, hotel_ids, config.start_date, config.end_date)
    competitors = fetch_competitor_details(con, [str(c) for c in config.competitor_ids])
    return build_insights(rows, competitors, config)
