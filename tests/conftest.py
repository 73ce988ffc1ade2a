"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from floodrisk.geo.indexing import index_feature
from floodrisk.geo.models import Feature, Point, Polygon


def _square_ring(min_lon: float, min_lat: float, max_lon: float, max_lat: float):
    return (
        (min_lon, min_lat),
        (max_lon, min_lat),
        (max_lon, max_lat),
        (min_lon, max_lat),
        (min_lon, min_lat),
    )


@pytest.fixture
def square_feature():
    """Build an indexed square polygon feature from a lon/lat extent.

    Extra keyword arguments become feature properties; ``holes`` takes a list
    of extents cut out of the square.
    """

    def build(min_lon, min_lat, max_lon, max_lat, holes=(), **properties) -> Feature:
        rings = [_square_ring(min_lon, min_lat, max_lon, max_lat)]
        rings.extend(_square_ring(*hole) for hole in holes)
        return index_feature(
            Feature(geometry=Polygon(coordinates=tuple(rings)), properties=properties)
        )

    return build


@pytest.fixture
def point_feature():
    """Build an indexed point feature."""

    def build(lon, lat, **properties) -> Feature:
        return index_feature(
            Feature(geometry=Point(coordinates=(lon, lat)), properties=properties)
        )

    return build


def square_geojson(min_lon, min_lat, max_lon, max_lat, **properties) -> dict:
    return {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [[list(p) for p in _square_ring(min_lon, min_lat, max_lon, max_lat)]],
        },
        "properties": properties,
    }


def point_geojson(lon, lat, **properties) -> dict:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "properties": properties,
    }


def collection(*features, crs: str | None = None) -> dict:
    payload = {"type": "FeatureCollection", "features": list(features)}
    if crs is not None:
        payload["crs"] = {"type": "name", "properties": {"name": crs}}
    return payload


@pytest.fixture
def geojson():
    """Raw GeoJSON builders: ``geojson.square``, ``geojson.point``, ``geojson.collection``."""

    class _Builders:
        square = staticmethod(square_geojson)
        point = staticmethod(point_geojson)
        collection = staticmethod(collection)

    return _Builders


@pytest.fixture
def layer_data_dir(tmp_path, geojson):
    """A data directory with every layer file the default config expects.

    Zone AE covers (0,0)-(2,2), zone X covers (0,0)-(4,4). Two parcels sit in
    the AE square; two shelters lie north of the origin.
    """
    import json

    files = {
        "VE.geojson": geojson.collection(),
        "AE.geojson": geojson.collection(
            geojson.square(0, 0, 2, 2, FLD_ZONE="AE", STATIC_BFE=9.0, DEPTH=-9999)
        ),
        "AO.geojson": geojson.collection(),
        "A.geojson": geojson.collection(),
        "X.geojson": geojson.collection(geojson.square(0, 0, 4, 4, FLD_ZONE="X")),
        "shelter.geojson": geojson.collection(
            geojson.point(0.0, 0.5, Name="North School"),
            geojson.point(0.0, 3.0, Name="Hill Church"),
            geojson.point(10.0, 10.0, Name="Water Island Station"),
        ),
        "parcel_value.geojson": geojson.collection(
            geojson.square(
                0, 0, 1, 1,
                Name="Bay Lot 1", Land_Value=100000, Improved_V=200000,
                SHAPE_Area=4046.8564224, Tax_Legal_="PLOT 1 CHARLOTTE AMALIE",
            ),
            geojson.square(
                1, 1, 2, 2,
                Name="Water Lot 7", Land_Value=50000, Improved_V=0,
                SHAPE_Area=8093.7128448, Tax_Legal_="PARCEL 7 WATER ISLAND",
            ),
        ),
    }
    for name, payload in files.items():
        (tmp_path / name).write_text(json.dumps(payload), encoding="utf-8")
    return tmp_path
