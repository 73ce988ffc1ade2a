"""GeoJSON dataset loading."""

from floodrisk.loaders.geojson import LOAD_ERRORS, GeoJSONLoader

__all__ = ["GeoJSONLoader", "LOAD_ERRORS"]
