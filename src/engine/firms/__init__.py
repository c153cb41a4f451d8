"""NASA FIRMS active-fire data — CSV parsing, fetching, map markers."""

from engine.firms.parser import ColumnIndex, parse_firms_csv, resolve_columns, split_csv_line
from engine.firms.record import FIRMS_COLUMNS, FirmsRecord

__all__ = [
    "ColumnIndex",
    "FIRMS_COLUMNS",
    "FirmsRecord",
    "parse_firms_csv",
    "resolve_columns",
    "split_csv_line",
]
