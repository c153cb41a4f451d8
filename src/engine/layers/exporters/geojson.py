"""Export a fire Layer to a GeoJSON dict (RFC 7946).

GeoJSON coordinates are [lng, lat], which is already the internal storage
convention. Marker style rides along in the feature properties under
"style" so map clients can color points without a second lookup.
"""

from __future__ import annotations

from engine.layers.layer import Layer, LayerFeature


def export_geojson(layer: Layer) -> dict:
    """Export a Layer to a GeoJSON FeatureCollection dict.

    Args:
        layer: The Layer to export.

    Returns:
        Dict representing a valid GeoJSON FeatureCollection. Layer identity
        and visibility are carried in a top-level "layer" member.
    """
    return {
        "type": "FeatureCollection",
        "layer": {
            "id": layer.layer_id,
            "name": layer.name,
            "source": layer.source,
            "visible": layer.visible,
        },
        "features": [_feature_to_geojson(f) for f in layer.features],
    }


def _feature_to_geojson(feature: LayerFeature) -> dict:
    properties = dict(feature.properties)
    if feature.style:
        properties["style"] = dict(feature.style)
    return {
        "type": "Feature",
        "id": feature.feature_id,
        "geometry": {
            "type": feature.geometry_type,
            "coordinates": list(feature.coordinates),
        },
        "properties": properties,
    }
