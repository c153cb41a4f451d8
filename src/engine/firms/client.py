"""Fetch active-fire CSV from the NASA FIRMS area API.

URL form: {base}/{MAP_KEY}/{SOURCE}/{west,south,east,north}/{DAYS}

FIRMS answers some failures (bad key, bad source) with HTTP 200 and a
plain-text message instead of CSV; those are raised as FirmsResponseError.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
from loguru import logger

from engine.firms.parser import parse_firms_csv
from engine.firms.record import FirmsRecord

DEFAULT_API_URL = "https://firms.modaps.eosdis.nasa.gov/api/area/csv"
DEFAULT_SOURCE = "VIIRS_SNPP_NRT"
MAX_DAY_RANGE = 10

_USER_AGENT = "FIRMS-MAP/0.1.0"


class FirmsError(Exception):
    """Base class for FIRMS fetch errors."""


class FirmsConfigError(FirmsError):
    """No MAP_KEY configured."""


class FirmsResponseError(FirmsError):
    """FIRMS returned a non-CSV body."""


@dataclass(frozen=True)
class BoundingBox:
    """WGS84 area in FIRMS order: west, south, east, north."""

    west: float
    south: float
    east: float
    north: float

    def __post_init__(self) -> None:
        if not (-180.0 <= self.west <= 180.0 and -180.0 <= self.east <= 180.0):
            raise ValueError(f"Longitude out of range: {self}")
        if not (-90.0 <= self.south <= 90.0 and -90.0 <= self.north <= 90.0):
            raise ValueError(f"Latitude out of range: {self}")
        if self.west > self.east or self.south > self.north:
            raise ValueError(f"Empty bounding box: {self}")

    @classmethod
    def parse(cls, text: str) -> BoundingBox:
        """Parse "west,south,east,north".

        Raises:
            ValueError: On wrong arity, non-numeric or out-of-range values.
        """
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 4:
            raise ValueError(f"Bounding box needs 4 values, got {len(parts)}: {text!r}")
        west, south, east, north = (float(p) for p in parts)
        return cls(west, south, east, north)

    def __str__(self) -> str:
        return f"{self.west:g},{self.south:g},{self.east:g},{self.north:g}"


def clamp_days(days: int) -> int:
    return max(1, min(MAX_DAY_RANGE, int(days)))


def build_area_url(
    map_key: str,
    source: str,
    bbox: BoundingBox,
    days: int,
    base_url: str = DEFAULT_API_URL,
) -> str:
    return f"{base_url.rstrip('/')}/{map_key}/{source}/{bbox}/{clamp_days(days)}"


class FirmsClient:
    """Async client for the FIRMS area CSV endpoint."""

    def __init__(
        self,
        map_key: str,
        source: str = DEFAULT_SOURCE,
        day_range: int = 1,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.map_key = map_key or ""
        self.source = source
        self.day_range = clamp_days(day_range)
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings) -> FirmsClient:
        return cls(
            map_key=settings.firms_map_key,
            source=settings.firms_source,
            day_range=settings.firms_day_range,
            base_url=settings.firms_api_url,
            timeout=settings.firms_timeout,
        )

    @property
    def configured(self) -> bool:
        return bool(self.map_key)

    async def fetch_csv(
        self,
        bbox: BoundingBox,
        days: int | None = None,
        source: str | None = None,
    ) -> str:
        """Fetch raw FIRMS CSV for an area.

        Raises:
            FirmsConfigError: No MAP_KEY configured.
            FirmsResponseError: FIRMS returned a message instead of CSV.
            httpx.HTTPError: Transport failure or non-2xx status.
        """
        if not self.configured:
            raise FirmsConfigError("FIRMS MAP_KEY is not configured")

        source = source or self.source
        url = build_area_url(
            self.map_key, source, bbox,
            days if days is not None else self.day_range,
            self.base_url,
        )
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport,
        ) as client:
            try:
                resp = await client.get(url, headers={"User-Agent": _USER_AGENT})
                resp.raise_for_status()
            except httpx.HTTPError as e:
                logger.warning(f"FIRMS request failed ({source} {bbox}): {e}")
                raise

        text = resp.text
        first_line = text.lstrip().split("\n", 1)[0]
        if first_line and "," not in first_line:
            raise FirmsResponseError(first_line.strip())
        return text

    async def fetch_records(
        self,
        bbox: BoundingBox,
        days: int | None = None,
        source: str | None = None,
    ) -> list[FirmsRecord]:
        """Fetch and parse FIRMS detections for an area."""
        records = parse_firms_csv(await self.fetch_csv(bbox, days, source))
        logger.info(f"FIRMS fetch: {source or self.source} {bbox} -> {len(records)} fires")
        return records
