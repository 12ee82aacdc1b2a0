"""Comp-set ranking and composition.

Main entry points: ranking.rank_market, composition.build_composition
"""
from .ranking import RankResult, rank_entity, rank_value, rank_market, classify_band, percentile_for
from .composition import CompositionBreakdown, CategoryBreakdown, build_composition

__all__ = [
    'RankResult', 'rank_entity', 'rank_value', 'rank_market', 'classify_band', 'percentile_for',
    'CompositionBreakdown', 'CategoryBreakdown', 'build_composition',
]
