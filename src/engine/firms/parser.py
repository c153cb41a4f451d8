"""Parse NASA FIRMS CSV text into FirmsRecord instances.

The header row is resolved once per call into a column index, then every
data row is split with a small quote-aware tokenizer. Rows whose
latitude/longitude do not parse as finite floats are dropped, never raised.

The tokenizer deliberately does not understand escaped quotes (``""``):
FIRMS exports never produce them and each quote simply toggles quoting.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from loguru import logger

from engine.firms.record import FIRMS_COLUMNS, OPTIONAL_COLUMNS, FirmsRecord

_LINE_BREAK = re.compile(r"\r?\n")
# Whitespace and U+FEFF (byte order mark) at either end of a string.
_EDGE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")
# ASCII decimal with optional exponent. No underscores, no non-ASCII digits.
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def _trim(text: str) -> str:
    return _EDGE.sub("", text)


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line into stripped fields, honoring double quotes.

    Quote characters are dropped and only toggle the quoted state, so commas
    inside a quoted region stay in the field. Unbalanced quotes are tolerated.

    Args:
        line: A single line of CSV text (no line breaks).

    Returns:
        List of fields; always one more than the number of unquoted commas.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return [_trim(f) for f in fields]


@dataclass(frozen=True)
class ColumnIndex:
    """Positions of the recognized FIRMS columns in one header row.

    Columns missing from the header map to None.
    """

    positions: dict[str, int | None] = field(default_factory=dict)

    def get(self, name: str) -> int | None:
        return self.positions.get(name)

    @property
    def has_coordinates(self) -> bool:
        return (
            self.positions.get("latitude") is not None
            and self.positions.get("longitude") is not None
        )


def resolve_columns(header_line: str) -> ColumnIndex:
    """Resolve each recognized column name to its index in the header.

    The header is split on plain commas (column names are never quoted).
    Matching is case-insensitive and exact; the first match wins.
    """
    names = [_trim(h).lower() for h in header_line.split(",")]
    first_seen: dict[str, int] = {}
    for idx, name in enumerate(names):
        first_seen.setdefault(name, idx)
    return ColumnIndex({col: first_seen.get(col) for col in FIRMS_COLUMNS})


def _cell(row: list[str], idx: int | None) -> str | None:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def _coordinate(row: list[str], idx: int | None) -> float | None:
    text = _cell(row, idx)
    if text is None or not _NUMBER.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def parse_firms_csv(csv_text: str) -> list[FirmsRecord]:
    """Parse FIRMS CSV text into records, in input row order.

    Args:
        csv_text: Full CSV content, header row first.

    Returns:
        One FirmsRecord per row with finite latitude and longitude. Returns
        an empty list when there is no data row.
    """
    lines = _LINE_BREAK.split(_trim(csv_text))
    if len(lines) < 2:
        return []

    columns = resolve_columns(lines[0])
    lat_idx = columns.get("latitude")
    lng_idx = columns.get("longitude")

    records: list[FirmsRecord] = []
    skipped = 0
    for line in lines[1:]:
        row = split_csv_line(line)
        if not row:
            continue
        lat = _coordinate(row, lat_idx)
        lng = _coordinate(row, lng_idx)
        if lat is None or lng is None:
            skipped += 1
            continue
        optional = {name: _cell(row, columns.get(name)) for name in OPTIONAL_COLUMNS}
        records.append(FirmsRecord(latitude=lat, longitude=lng, **optional))

    if not columns.has_coordinates:
        logger.debug("FIRMS CSV header has no latitude/longitude columns")
    logger.debug(f"FIRMS CSV parsed: {len(records)} records, {skipped} rows skipped")
    return records
