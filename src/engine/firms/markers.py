"""Turn FirmsRecord sequences into point-marker Layers for the map."""

from __future__ import annotations

import math
import uuid
from typing import Iterable

from engine.firms.record import FirmsRecord
from engine.layers.layer import Layer, LayerFeature

# Marker colors by detection confidence.
CONFIDENCE_COLORS = {
    "high": "#d7191c",
    "nominal": "#fdae61",
    "low": "#ffffbf",
}
UNKNOWN_COLOR = "#999999"


def confidence_level(confidence: str | None) -> str | None:
    """Normalize FIRMS confidence to "high", "nominal", "low" or None.

    VIIRS reports words (or their initials h/n/l); MODIS reports 0-100.
    MODIS percentages use the FIRMS thresholds: <30 low, >=80 high.
    """
    if confidence is None:
        return None
    text = confidence.strip().lower()
    if text in CONFIDENCE_COLORS:
        return text
    initials = {"h": "high", "n": "nominal", "l": "low"}
    if text in initials:
        return initials[text]
    try:
        pct = float(text)
    except ValueError:
        return None
    if not math.isfinite(pct):
        return None
    if pct >= 80:
        return "high"
    if pct >= 30:
        return "nominal"
    return "low"


def marker_style(record: FirmsRecord) -> dict:
    level = confidence_level(record.confidence)
    return {
        "color": CONFIDENCE_COLORS.get(level, UNKNOWN_COLOR),
        "radius": 6 if level == "high" else 4,
    }


def record_to_feature(record: FirmsRecord, idx: int) -> LayerFeature:
    """One Point feature per record; unset optional fields are omitted."""
    return LayerFeature(
        feature_id=f"fire-{idx}",
        coordinates=[record.longitude, record.latitude],
        properties=record.optional_fields(),
        style=marker_style(record),
    )


def records_to_layer(
    records: Iterable[FirmsRecord],
    name: str = "FIRMS Active Fires",
    source: str = "csv",
) -> Layer:
    """Build a Layer holding one marker per record, in record order."""
    features = [record_to_feature(r, idx) for idx, r in enumerate(records)]
    return Layer(
        layer_id=f"layer-{uuid.uuid4().hex[:8]}",
        name=name,
        source=source,
        features=features,
        metadata={"record_count": len(features)},
    )
