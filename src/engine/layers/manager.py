"""LayerManager — registry of active fire-marker layers.

Manages the lifecycle of Layer objects: add, remove, get, list,
import from FIRMS CSV text, export to GeoJSON, and visibility control.
"""

from __future__ import annotations

from datetime import datetime, timezone

from loguru import logger

from engine.layers.layer import Layer


class LayerManager:
    """Registry of active map layers."""

    def __init__(self) -> None:
        self._layers: dict[str, Layer] = {}

    def add_layer(self, layer: Layer) -> str:
        """Add a layer to the registry.

        Args:
            layer: The Layer to register.

        Returns:
            The layer_id of the added layer.
        """
        self._layers[layer.layer_id] = layer
        return layer.layer_id

    def remove_layer(self, layer_id: str) -> bool:
        """Remove a layer from the registry.

        Returns:
            True if the layer was removed, False if it didn't exist.
        """
        if layer_id in self._layers:
            del self._layers[layer_id]
            logger.info(f"Layer removed: {layer_id}")
            return True
        return False

    def get_layer(self, layer_id: str) -> Layer | None:
        return self._layers.get(layer_id)

    def list_layers(self) -> list[Layer]:
        return list(self._layers.values())

    def set_visibility(self, layer_id: str, visible: bool) -> None:
        """Set the visibility of a layer.

        Raises:
            KeyError: If the layer_id is not found.
        """
        layer = self._layers.get(layer_id)
        if layer is None:
            raise KeyError(f"Layer not found: {layer_id}")
        layer.visible = visible
        layer.updated_at = datetime.now(timezone.utc).isoformat()

    def import_firms_csv(
        self,
        csv_text: str,
        name: str = "FIRMS Active Fires",
        source: str = "csv",
    ) -> Layer:
        """Parse FIRMS CSV text into a new layer and register it.

        Args:
            csv_text: Raw FIRMS CSV content.
            name: Display name for the layer.
            source: Data product label, e.g. "VIIRS_SNPP_NRT".

        Returns:
            The imported Layer (also registered in the manager). Rows without
            usable coordinates are dropped, so the layer may be empty.
        """
        from engine.firms.markers import records_to_layer
        from engine.firms.parser import parse_firms_csv

        layer = records_to_layer(parse_firms_csv(csv_text), name=name, source=source)

        now = datetime.now(timezone.utc).isoformat()
        layer.created_at = now
        layer.updated_at = now

        self.add_layer(layer)
        logger.info(f"Layer imported: {layer.layer_id} ({len(layer.features)} fires, source={source})")
        return layer

    def export_layer(self, layer_id: str, format: str = "geojson") -> dict:
        """Export a layer in the given format.

        Raises:
            KeyError: If the layer_id is not found.
            ValueError: If the format is not supported.
        """
        layer = self._layers.get(layer_id)
        if layer is None:
            raise KeyError(f"Layer not found: {layer_id}")

        if format == "geojson":
            from engine.layers.exporters.geojson import export_geojson
            return export_geojson(layer)
        raise ValueError(f"Unsupported export format: {format}")
