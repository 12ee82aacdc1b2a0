"""
Market Insights Aggregation Engine - Source Code.

Modules:
- data: Metric row normalization and snapshot loading
- features: Period keys, aggregation and derived metrics
- recommender: Comp-set ranking and composition breakdowns
- presentation: Stateless formatting and colour helpers
- pipeline: End-to-end dashboard payload
"""
