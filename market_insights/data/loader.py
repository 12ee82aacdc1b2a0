"""
Data loading utilities for the insights engine.

Loads the daily metrics snapshot export and the hotels directory from CSV
files into DuckDB, then hands raw rows to the normalizer. Everything is read
as VARCHAR and typed with TRY_CAST so one malformed cell degrades to NULL
instead of failing the whole load.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import duckdb

logger = logging.getLogger(__name__)

SNAPSHOT_TABLE = 'daily_metrics_snapshots'
HOTELS_TABLE = 'hotels'

REVENUE_BASES = ('gross', 'net')


def _load_csv_as_varchar(con: duckdb.DuckDBPyConnection, csv_path: Union[str, Path], table: str) -> List[str]:
    """Stage a CSV as an all-VARCHAR temp table and return its column names."""
    file_path = Path(csv_path)
    if not file_path.exists():
        raise FileNotFoundError(f"CSV not found: {file_path}")

    con.execute(f"DROP TABLE IF EXISTS temp_{table}")
    con.execute(f"""
        CREATE TEMP TABLE temp_{table} AS
        SELECT * FROM read_csv_auto('{file_path}', all_varchar=True, nullstr='NULL')
    """)
    return [row[0] for row in con.execute(f"DESCRIBE temp_{table}").fetchall()]


def _col(available: Sequence[str], name: str, cast: str) -> str:
    if name in available:
        return f"TRY_CAST(NULLIF(TRIM({name}), '') AS {cast})"
    return f"CAST(NULL AS {cast})"


def load_snapshots(
    csv_path: Union[str, Path],
    con: Optional[duckdb.DuckDBPyConnection] = None,
    revenue_basis: str = 'gross'
) -> duckdb.DuckDBPyConnection:
    """
    Load a daily metrics snapshot CSV into DuckDB.

    Expected columns: hotel_id, stay_date, rooms_sold, capacity_count and
    {gross,net}_adr / {gross,net}_revenue. occupancy is optional. Missing
    metric columns load as NULL.

    Args:
        csv_path: Path to the snapshot export
        con: Existing connection (a new in-memory one is created if None)
        revenue_basis: 'gross' or 'net' revenue/ADR columns

    Returns:
        Connection with a typed daily_metrics_snapshots table
    """
    if revenue_basis not in REVENUE_BASES:
        raise ValueError(f"revenue_basis must be one of {REVENUE_BASES}, got {revenue_basis!r}")

    if con is None:
        con = duckdb.connect(database=":memory:", read_only=False)

    available = _load_csv_as_varchar(con, csv_path, SNAPSHOT_TABLE)

    con.execute(f"DROP TABLE IF EXISTS {SNAPSHOT_TABLE}")
    con.execute(f"""
        CREATE TABLE {SNAPSHOT_TABLE} AS
        SELECT
            TRIM(hotel_id) AS hotel_id,
            {_col(available, 'stay_date', 'DATE')} AS stay_date,
            {_col(available, 'rooms_sold', 'DOUBLE')} AS rooms_sold,
            {_col(available, 'capacity_count', 'DOUBLE')} AS capacity_count,
            {_col(available, f'{revenue_basis}_adr', 'DOUBLE')} AS adr,
            {_col(available, f'{revenue_basis}_revenue', 'DOUBLE')} AS total_revenue,
            {_col(available, 'occupancy', 'DOUBLE')} AS occupancy
        FROM temp_{SNAPSHOT_TABLE}
    """)
    con.execute(f"DROP TABLE temp_{SNAPSHOT_TABLE}")

    n_rows = con.execute(f"SELECT COUNT(*) FROM {SNAPSHOT_TABLE}").fetchone()[0]
    logger.info(f"Loaded {n_rows:,} snapshot rows ({revenue_basis} revenue) from {csv_path}")
    return con


def load_hotels(
    csv_path: Union[str, Path],
    con: Optional[duckdb.DuckDBPyConnection] = None
) -> duckdb.DuckDBPyConnection:
    """
    Load the hotels directory (hotel_id, category, neighborhood, total_rooms).

    Returns:
        Connection with a typed hotels table
    """
    if con is None:
        con = duckdb.connect(database=":memory:", read_only=False)

    available = _load_csv_as_varchar(con, csv_path, HOTELS_TABLE)

    con.execute(f"DROP TABLE IF EXISTS {HOTELS_TABLE}")
    con.execute(f"""
        CREATE TABLE {HOTELS_TABLE} AS
        SELECT
            TRIM(hotel_id) AS hotel_id,
            {_col(available, 'category', 'VARCHAR')} AS category,
            {_col(available, 'neighborhood', 'VARCHAR')} AS neighborhood,
            {_col(available, 'total_rooms', 'BIGINT')} AS total_rooms
        FROM temp_{HOTELS_TABLE}
    """)
    con.execute(f"DROP TABLE temp_{HOTELS_TABLE}")
    return con


def _fetch_dicts(con: duckdb.DuckDBPyConnection, query: str, params: List[Any]) -> List[Dict[str, Any]]:
    result = con.execute(query, params)
    names = [d[0] for d in result.description]
    return [dict(zip(names, row)) for row in result.fetchall()]


def fetch_metric_rows(
    con: duckdb.DuckDBPyConnection,
    hotel_ids: Optional[Sequence[str]] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> List[Dict[str, Any]]:
    """
    Fetch raw metric rows for the normalizer.

    Rows without a parseable stay_date are dropped here, so the engine only
    ever sees valid period keys.

    Args:
        con: Connection with daily_metrics_snapshots loaded
        hotel_ids: Restrict to these hotels (all hotels if None)
        start_date: Inclusive lower bound on stay_date
        end_date: Inclusive upper bound on stay_date

    Returns:
        List of row dicts ordered by hotel_id, stay_date
    """
    conditions = ["s.stay_date IS NOT NULL"]
    params: List[Any] = []

    if hotel_ids is not None:
        if len(hotel_ids) == 0:
            return []
        placeholders = ", ".join("?" for _ in hotel_ids)
        conditions.append(f"s.hotel_id IN ({placeholders})")
        params.extend(str(h) for h in hotel_ids)
    if start_date is not None:
        conditions.append("s.stay_date >= ?")
        params.append(start_date)
    if end_date is not None:
        conditions.append("s.stay_date <= ?")
        params.append(end_date)

    query = f"""
        SELECT
            s.hotel_id,
            strftime(s.stay_date, '%Y-%m-%d') AS stay_date,
            s.adr,
            s.rooms_sold,
            s.capacity_count,
            s.total_revenue,
            s.occupancy
        FROM {SNAPSHOT_TABLE} s
        WHERE {' AND '.join(conditions)}
        ORDER BY s.hotel_id, s.stay_date
    """
    return _fetch_dicts(con, query, params)


def fetch_competitor_details(
    con: duckdb.DuckDBPyConnection,
    competitor_ids: Sequence[str]
) -> List[Dict[str, Any]]:
    """
    Fetch category, neighborhood and rooms for a comp set.

    Returns:
        List of dicts with keys hotel_id, category, neighborhood, rooms
    """
    if not competitor_ids:
        return []

    placeholders = ", ".join("?" for _ in competitor_ids)
    query = f"""
        SELECT hotel_id, category, neighborhood, total_rooms AS rooms
        FROM {HOTELS_TABLE}
        WHERE hotel_id IN ({placeholders})
        ORDER BY hotel_id
    """
    return _fetch_dicts(con, query, [str(c) for c in competitor_ids])
