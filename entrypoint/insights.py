#!/usr/bin/env python
"""
Build the market insights payload for one hotel.

Usage:
    python entrypoint/insights.py --snapshots data/daily_metrics_snapshots.csv \\
        --hotels data/hotels.csv --hotel-id 101 --competitors 102 103 104
    python entrypoint/insights.py ... --granularity monthly --start 2025-01-01 --end 2025-03-31
    python entrypoint/insights.py ... --json   # Print the raw payload
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import argparse
import json
import logging
from datetime import date

from market_insights.config import GRANULARITIES, GRANULARITY_DAILY, InsightsConfig
from market_insights.data.loader import load_hotels, load_snapshots
from market_insights.pipeline import build_insights_from_db
from market_insights.presentation import format_metric, metric_label


def main():
    parser = argparse.ArgumentParser(description='Build market insights for a hotel')
    parser.add_argument('--snapshots', required=True, help='Daily metrics snapshot CSV')
    parser.add_argument('--hotels', required=True, help='Hotels directory CSV')
    parser.add_argument('--hotel-id', required=True, help='Subject hotel ID')
    parser.add_argument('--competitors', nargs='*', default=[], help='Comp-set hotel IDs')
    parser.add_argument('--granularity', choices=GRANULARITIES, default=GRANULARITY_DAILY)
    parser.add_argument('--start', type=date.fromisoformat, help='First stay date (inclusive)')
    parser.add_argument('--end', type=date.fromisoformat, help='Last stay date (inclusive)')
    parser.add_argument('--basis', choices=['gross', 'net'], default='gross', help='Revenue basis')
    parser.add_argument('--json', action='store_true', help='Print the payload as JSON')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(message)s')

    con = load_snapshots(args.snapshots, revenue_basis=args.basis)
    load_hotels(args.hotels, con)

    config = InsightsConfig(
        subject_id=args.hotel_id,
        competitor_ids=args.competitors,
        granularity=args.granularity,
        start_date=args.start,
        end_date=args.end,
    )
    report = build_insights_from_db(con, config)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return

    print("\n" + "=" * 70)
    print(f"MARKET INSIGHTS: Hotel {report.subject_id} ({report.granularity})")
    print("=" * 70)

    market_by_period = {s.period_key: s for s in report.market_summaries}
    for summary in report.hotel_summaries:
        market = market_by_period.get(summary.period_key)
        print(f"\n{summary.period_key}")
        for metric in ('occupancy', 'adr', 'revpar'):
            own = format_metric(metric, getattr(summary, metric))
            mkt = format_metric(metric, getattr(market, metric) if market else None)
            print(f"  {metric_label(metric):<10} {own:>12}  | market {mkt:>12}")

    print(f"\n{'─' * 50}")
    print("Ranking")
    print(f"{'─' * 50}")
    for metric, result in report.rankings.items():
        if result is None:
            print(f"  {metric_label(metric):<10} insufficient data")
        else:
            print(f"  {metric_label(metric):<10} {result.rank} of {result.total} "
                  f"({result.percentile}th percentile, {result.band})")

    composition = report.composition
    print(f"\n{'─' * 50}")
    print(f"Composition: {composition.total_competitors} competitors, {composition.total_rooms:,} rooms")
    print(f"{'─' * 50}")
    for name, bucket in sorted(composition.categories.items(), key=lambda kv: -kv[1].properties):
        print(f"  {name:<16} {bucket.properties:>3} properties  {bucket.rooms:>6,} rooms")


if __name__ == "__main__":
    main()
