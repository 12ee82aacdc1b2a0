"""
Tests for market_insights/data/normalizer.py - raw row coercion.
"""

import math

import numpy as np
import pandas as pd
import pytest

from market_insights.config import ColumnMapping
from market_insights.data.normalizer import (
    MetricRecord,
    frame_to_records,
    normalize_frame,
    normalize_row,
    normalize_rows,
    to_number,
    to_optional_number,
)


class TestToNumber:
    """Test the numeric coercion policy."""

    @pytest.mark.parametrize("raw, expected", [
        (12, 12.0),
        (12.5, 12.5),
        ('12.5', 12.5),
        (' 7 ', 7.0),
        ('1e3', 1000.0),
        (np.int64(4), 4.0),
    ])
    def test_numeric_values_are_parsed(self, raw, expected):
        assert to_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, '', '   ', 'abc', 'n/a', float('nan'), 'NaN', float('inf'), '-inf', [], {}])
    def test_missing_or_junk_becomes_zero(self, raw):
        """Missing metrics must never poison a sum with NaN."""
        value = to_number(raw)
        assert value == 0.0
        assert not math.isnan(value)

    def test_optional_number_keeps_none(self):
        assert to_optional_number(None) is None
        assert to_optional_number('junk') is None
        assert to_optional_number('0.75') == 0.75


class TestNormalizeRow:
    """Test single-row normalization."""

    def test_mixed_types(self):
        record = normalize_row({
            'stay_date': '2025-03-03', 'adr': '100.5', 'rooms_sold': 10,
            'capacity_count': '20', 'total_revenue': 1005, 'occupancy': '0.5', 'hotel_id': 101,
        })

        assert record == MetricRecord(
            period_key='2025-03-03', adr=100.5, rooms_sold=10.0, capacity_count=20.0,
            total_revenue=1005.0, occupancy=0.5, hotel_id='101',
        )

    def test_malformed_row_does_not_raise(self):
        """A fully broken row degrades to a zero-valued record."""
        record = normalize_row({'stay_date': '2025-03-03', 'adr': 'abc', 'rooms_sold': None})

        assert record.adr == 0.0
        assert record.rooms_sold == 0.0
        assert record.capacity_count == 0.0
        assert record.total_revenue == 0.0
        assert record.occupancy is None
        assert record.hotel_id is None

    def test_period_key_taken_verbatim(self):
        """No date validation at this layer."""
        record = normalize_row({'stay_date': 'not-a-date'})
        assert record.period_key == 'not-a-date'

    def test_rooms_sold_above_capacity_is_kept(self):
        record = normalize_row({'stay_date': '2025-03-03', 'rooms_sold': 30, 'capacity_count': 20})
        assert record.rooms_sold == 30.0
        assert record.capacity_count == 20.0

    def test_custom_column_mapping(self):
        columns = ColumnMapping(period_key='period', adr='gross_adr', total_revenue='gross_revenue')
        record = normalize_row(
            {'period': '2025-03', 'gross_adr': '99', 'gross_revenue': '990', 'rooms_sold': 10},
            columns,
        )
        assert record.period_key == '2025-03'
        assert record.adr == 99.0
        assert record.total_revenue == 990.0


class TestNormalizeBatch:
    """Test list and DataFrame normalization agree."""

    def test_normalize_rows_preserves_order(self, raw_rows):
        records = normalize_rows(raw_rows)
        assert len(records) == len(raw_rows)
        assert [r.hotel_id for r in records] == [row['hotel_id'] for row in raw_rows]

    def test_frame_matches_row_by_row(self, raw_rows):
        expected = normalize_rows(raw_rows)
        frame = normalize_frame(pd.DataFrame(raw_rows))
        assert frame_to_records(frame) == expected

    @pytest.mark.parametrize("rows", [
        pytest.param([
            {'hotel_id': 101, 'stay_date': '2025-03-03', 'adr': 100, 'rooms_sold': 10,
             'capacity_count': 20, 'total_revenue': 1000},
            {'hotel_id': 102, 'stay_date': '2025-03-03', 'adr': 80, 'rooms_sold': 5,
             'capacity_count': 20, 'total_revenue': 400},
        ], id='int-ids'),
        pytest.param([
            {'hotel_id': 101, 'stay_date': '2025-03-03', 'adr': 100, 'rooms_sold': 10,
             'capacity_count': 20, 'total_revenue': 1000, 'occupancy': 0.5},
            {'stay_date': '2025-03-04', 'adr': 90, 'rooms_sold': 3,
             'capacity_count': 10, 'total_revenue': 270},
        ], id='missing-id'),
        pytest.param([
            {'hotel_id': '101', 'stay_date': '2025-03-03', 'adr': True, 'rooms_sold': False,
             'capacity_count': 20, 'total_revenue': 1000},
            {'hotel_id': '101', 'stay_date': '2025-03-04', 'adr': 120.0, 'rooms_sold': True,
             'capacity_count': 20, 'total_revenue': 1200},
        ], id='boolean-cells'),
        pytest.param([
            {'hotel_id': ' 101', 'stay_date': '2025-03-03', 'adr': ' 100.5 ', 'rooms_sold': ' 7 ',
             'capacity_count': '\t20\n', 'total_revenue': '703.5 ', 'occupancy': ' 0.35'},
            {'hotel_id': '101', 'stay_date': '2025-03-04', 'adr': '   ', 'rooms_sold': 4,
             'capacity_count': 20, 'total_revenue': 'inf', 'occupancy': 'n/a'},
        ], id='padded-numeric-strings'),
    ])
    def test_frame_matches_row_by_row_on_awkward_inputs(self, rows):
        expected = normalize_rows(rows)
        frame = normalize_frame(pd.DataFrame(rows))
        assert frame_to_records(frame) == expected

    def test_integer_ids_stay_integral_when_one_is_missing(self):
        rows = [
            {'hotel_id': 101, 'stay_date': '2025-03-03', 'rooms_sold': 1},
            {'stay_date': '2025-03-03', 'rooms_sold': 2},
        ]
        frame = normalize_frame(pd.DataFrame(rows))

        assert frame['hotel_id'].tolist() == ['101', None]
        assert [r.hotel_id for r in normalize_rows(rows)] == ['101', None]

    def test_boolean_cells_are_not_numbers(self):
        frame = normalize_frame(pd.DataFrame([{'stay_date': '2025-03-03', 'adr': True, 'rooms_sold': 4}]))
        assert frame.loc[0, 'adr'] == 0.0
        assert normalize_row({'stay_date': '2025-03-03', 'adr': True}).adr == 0.0

    def test_frame_with_missing_columns(self):
        frame = normalize_frame(pd.DataFrame({'stay_date': ['2025-03-03'], 'adr': ['oops']}))

        assert frame.loc[0, 'adr'] == 0.0
        assert frame.loc[0, 'rooms_sold'] == 0.0
        assert frame.loc[0, 'occupancy'] is None
        assert frame.loc[0, 'hotel_id'] is None
