"""
Shared pytest fixtures for the insights engine tests.
"""

import pytest
import pandas as pd


@pytest.fixture
def raw_rows():
    """Raw analytics rows for a subject hotel (101) and two competitors."""
    return [
        # Subject, two stay dates in the same week
        {'hotel_id': '101', 'stay_date': '2025-03-03', 'adr': '100.0', 'rooms_sold': '10',
         'capacity_count': '20', 'total_revenue': '1000.0', 'occupancy': '0.5'},
        {'hotel_id': '101', 'stay_date': '2025-03-04', 'adr': 200.0, 'rooms_sold': 5,
         'capacity_count': 20, 'total_revenue': 1000.0, 'occupancy': None},
        # Competitor 102: higher occupancy, lower ADR
        {'hotel_id': '102', 'stay_date': '2025-03-03', 'adr': 80.0, 'rooms_sold': 18,
         'capacity_count': 20, 'total_revenue': 1440.0, 'occupancy': 0.9},
        {'hotel_id': '102', 'stay_date': '2025-03-04', 'adr': 'n/a', 'rooms_sold': 16,
         'capacity_count': 20, 'total_revenue': 1280.0, 'occupancy': ''},
        # Competitor 103: a malformed row that must degrade to zeros
        {'hotel_id': '103', 'stay_date': '2025-03-03', 'adr': 150.0, 'rooms_sold': 4,
         'capacity_count': 10, 'total_revenue': 600.0, 'occupancy': 0.4},
        {'hotel_id': '103', 'stay_date': '2025-03-10', 'adr': None, 'rooms_sold': 'NaN',
         'capacity_count': None, 'total_revenue': 'abc'},
    ]


@pytest.fixture
def competitors():
    """Comp-set inventory as returned by the hotels directory."""
    return [
        {'hotel_id': '102', 'category': 'Luxury', 'neighborhood': 'Soho', 'rooms': 100},
        {'hotel_id': '103', 'category': 'Midscale', 'neighborhood': 'Camden', 'rooms': 50},
        {'hotel_id': '104', 'category': 'Luxury', 'neighborhood': 'Soho', 'rooms': 150},
    ]


@pytest.fixture
def snapshot_csv(tmp_path):
    """Daily metrics snapshot export on disk."""
    df = pd.DataFrame({
        'hotel_id': ['101', '101', '102', '102', '103', '103'],
        'stay_date': ['2025-03-01', '2025-03-02', '2025-03-01', '2025-03-02', '2025-03-01', 'not-a-date'],
        'rooms_sold': ['10', '5', '18', '16', 'NULL', '3'],
        'capacity_count': ['20', '20', '20', '20', '10', '10'],
        'gross_adr': ['100', '200', '80', '85', '150', '120'],
        'net_adr': ['90', '180', '72', '76', '135', '108'],
        'gross_revenue': ['1000', '1000', '1440', '1360', '600', '360'],
        'net_revenue': ['900', '900', '1296', '1224', '540', '324'],
    })
    path = tmp_path / 'daily_metrics_snapshots.csv'
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def hotels_csv(tmp_path):
    """Hotels directory export on disk."""
    df = pd.DataFrame({
        'hotel_id': ['101', '102', '103'],
        'category': ['Upper Midscale', 'Luxury', ''],
        'neighborhood': ['Soho', 'Soho', 'Camden'],
        'total_rooms': ['20', '20', '10'],
    })
    path = tmp_path / 'hotels.csv'
    df.to_csv(path, index=False)
    return path
