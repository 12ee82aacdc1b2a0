"""
Tests for market_insights/data/loader.py - snapshot loading through DuckDB.
"""

from datetime import date

import duckdb
import pytest

from market_insights.data.loader import (
    fetch_competitor_details,
    fetch_metric_rows,
    load_hotels,
    load_snapshots,
)
from market_insights.data.normalizer import normalize_rows


class TestLoadSnapshots:
    """Test loading the daily metrics snapshot export."""

    def test_creates_connection(self, snapshot_csv):
        con = load_snapshots(snapshot_csv)
        assert isinstance(con, duckdb.DuckDBPyConnection)
        assert con.execute("SELECT COUNT(*) FROM daily_metrics_snapshots").fetchone()[0] == 6

    def test_reuses_connection(self, snapshot_csv):
        con = duckdb.connect(":memory:")
        assert load_snapshots(snapshot_csv, con) is con

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_snapshots(tmp_path / 'missing.csv')

    def test_bad_revenue_basis(self, snapshot_csv):
        with pytest.raises(ValueError):
            load_snapshots(snapshot_csv, revenue_basis='taxed')

    def test_net_basis_selects_net_columns(self, snapshot_csv):
        con = load_snapshots(snapshot_csv, revenue_basis='net')
        rows = fetch_metric_rows(con, ['101'])
        assert rows[0]['adr'] == 90.0
        assert rows[0]['total_revenue'] == 900.0

    def test_missing_optional_column_loads_as_null(self, snapshot_csv):
        con = load_snapshots(snapshot_csv)
        rows = fetch_metric_rows(con, ['101'])
        assert all(row['occupancy'] is None for row in rows)


class TestFetchMetricRows:
    """Test filtered row fetches."""

    def test_filters_by_hotel(self, snapshot_csv):
        con = load_snapshots(snapshot_csv)
        rows = fetch_metric_rows(con, ['101', '102'])

        assert {row['hotel_id'] for row in rows} == {'101', '102'}
        assert rows[0]['stay_date'] == '2025-03-01'

    def test_drops_unparseable_dates(self, snapshot_csv):
        con = load_snapshots(snapshot_csv)
        rows = fetch_metric_rows(con, ['103'])
        assert len(rows) == 1

    def test_null_cells_normalize_to_zero(self, snapshot_csv):
        con = load_snapshots(snapshot_csv)
        records = normalize_rows(fetch_metric_rows(con, ['103']))
        assert records[0].rooms_sold == 0.0
        assert records[0].adr == 150.0

    def test_date_range(self, snapshot_csv):
        con = load_snapshots(snapshot_csv)
        rows = fetch_metric_rows(con, start_date=date(2025, 3, 2), end_date=date(2025, 3, 2))
        assert {row['stay_date'] for row in rows} == {'2025-03-02'}
        assert len(rows) == 2

    def test_empty_hotel_list(self, snapshot_csv):
        con = load_snapshots(snapshot_csv)
        assert fetch_metric_rows(con, []) == []


class TestHotels:
    """Test the hotels directory."""

    def test_competitor_details(self, hotels_csv):
        con = load_hotels(hotels_csv)
        details = fetch_competitor_details(con, ['102', '103'])

        assert [d['hotel_id'] for d in details] == ['102', '103']
        assert details[0]['category'] == 'Luxury'
        assert details[0]['rooms'] == 20
        assert details[1]['category'] is None

    def test_no_competitors(self, hotels_csv):
        con = load_hotels(hotels_csv)
        assert fetch_competitor_details(con, []) == []
