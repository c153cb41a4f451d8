"""Layer and LayerFeature dataclasses for fire-marker map layers.

All coordinates are stored in GeoJSON convention: [lng, lat].
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LayerFeature:
    """A single point marker within a layer.

    Attributes:
        feature_id: Unique identifier for this feature within its layer.
        coordinates: GeoJSON Point coordinates [lng, lat].
        properties: Popup/tooltip metadata (string values from the source).
        style: Optional rendering hints (color, radius, opacity).
    """

    feature_id: str
    coordinates: list[float]
    properties: dict
    style: dict | None = None

    @property
    def geometry_type(self) -> str:
        return "Point"

    @property
    def lat(self) -> float:
        return self.coordinates[1]

    @property
    def lng(self) -> float:
        return self.coordinates[0]


@dataclass
class Layer:
    """A named collection of point markers.

    Attributes:
        layer_id: Unique identifier for this layer.
        name: Human-readable display name.
        source: Data product the markers came from, e.g. "VIIRS_SNPP_NRT".
        features: List of LayerFeature instances.
        visible: Whether the layer is currently rendered.
        metadata: Arbitrary key-value metadata about the layer.
        created_at: ISO8601 creation timestamp.
        updated_at: ISO8601 last-update timestamp.
    """

    layer_id: str
    name: str
    source: str
    features: list[LayerFeature]
    visible: bool = True
    metadata: dict = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""
