"""FirmsRecord dataclass — one NASA FIRMS fire-detection observation.

Only latitude/longitude are required. The optional columns keep the raw
text from the CSV; ``None`` means the column was not in the header (or the
row was too short to reach it), which is distinct from an empty cell.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

# Recognized FIRMS columns, in record field order.
FIRMS_COLUMNS: tuple[str, ...] = (
    "latitude",
    "longitude",
    "acq_date",
    "acq_time",
    "confidence",
    "daynight",
    "bright_t31",
    "brightness",
    "frp",
    "satellite",
    "version",
)

OPTIONAL_COLUMNS: tuple[str, ...] = FIRMS_COLUMNS[2:]


@dataclass(frozen=True)
class FirmsRecord:
    """A single fire detection parsed from a FIRMS CSV row.

    Attributes:
        latitude: Detection latitude in degrees (always finite).
        longitude: Detection longitude in degrees (always finite).
        acq_date: Acquisition date, e.g. "2024-08-01".
        acq_time: Acquisition time as HHMM UTC, e.g. "0912".
        confidence: "high"/"nominal"/"low" (VIIRS) or 0-100 (MODIS).
        daynight: "D" or "N".
        bright_t31: Channel 31 brightness temperature (Kelvin), raw text.
        brightness: Channel 21/22 brightness temperature (Kelvin), raw text.
        frp: Fire radiative power (MW), raw text.
        satellite: Satellite identifier, e.g. "N" or "Terra".
        version: Collection/processing version, e.g. "2.0NRT".
    """

    latitude: float
    longitude: float
    acq_date: str | None = None
    acq_time: str | None = None
    confidence: str | None = None
    daynight: str | None = None
    bright_t31: str | None = None
    brightness: str | None = None
    frp: str | None = None
    satellite: str | None = None
    version: str | None = None

    def to_dict(self) -> dict:
        """Return all fields as a plain dict (unset fields are None)."""
        return asdict(self)

    def optional_fields(self) -> dict[str, str]:
        """Return only the optional fields that are set."""
        return {
            name: getattr(self, name)
            for name in OPTIONAL_COLUMNS
            if getattr(self, name) is not None
        }
