"""Map data layer system — fire markers and GeoJSON export."""

from engine.layers.layer import Layer, LayerFeature
from engine.layers.manager import LayerManager

__all__ = ["Layer", "LayerFeature", "LayerManager"]
