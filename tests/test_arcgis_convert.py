from urllib.parse import parse_qs, urlparse

from aoi_soils.arcgis import (
    arcgis_to_geojson,
    build_geometry_query_url,
    geojson_from_esri_geometry,
    to_featurecollection,
)
from aoi_soils.geometry import to_query_geometry


# Esri winding: exterior clockwise, hole counter-clockwise.
OUTER_CW = [[0, 0], [0, 10], [10, 10], [10, 0], [0, 0]]
HOLE_CCW = [[2, 2], [4, 2], [4, 4], [2, 4], [2, 2]]
OTHER_CW = [[20, 0], [20, 5], [25, 5], [25, 0], [20, 0]]


def test_single_ring_becomes_polygon_with_ccw_exterior():
    gj = geojson_from_esri_geometry({"rings": [OUTER_CW]})
    assert gj["type"] == "Polygon"
    assert gj["coordinates"] == [[[float(x), float(y)] for x, y in reversed(OUTER_CW)]]


def test_hole_is_attached_to_its_exterior():
    gj = geojson_from_esri_geometry({"rings": [OUTER_CW, HOLE_CCW]})
    assert gj["type"] == "Polygon"
    assert len(gj["coordinates"]) == 2


def test_two_exteriors_become_multipolygon():
    gj = geojson_from_esri_geometry({"rings": [OUTER_CW, HOLE_CCW, OTHER_CW]})
    assert gj["type"] == "MultiPolygon"
    assert len(gj["coordinates"]) == 2
    assert len(gj["coordinates"][0]) == 2
    assert len(gj["coordinates"][1]) == 1


def test_unclosed_ring_is_closed():
    gj = geojson_from_esri_geometry({"rings": [OUTER_CW[:-1]]})
    ring = gj["coordinates"][0]
    assert ring[0] == ring[-1]
    assert len(ring) == 5


def test_point_and_empty_geometry():
    assert geojson_from_esri_geometry({"x": -86.1, "y": 39.7}) == {
        "type": "Point",
        "coordinates": [-86.1, 39.7],
    }
    assert geojson_from_esri_geometry(None) is None
    assert geojson_from_esri_geometry({}) is None
    assert geojson_from_esri_geometry({"rings": [[[0, 0], [1, 1]]]}) is None


def test_polyline_paths():
    gj = geojson_from_esri_geometry({"paths": [[[0, 0], [1, 1], [2, 1]]]})
    assert gj == {"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 1.0], [2.0, 1.0]]}


def test_feature_conversion_keeps_attributes_and_id():
    feat = arcgis_to_geojson(
        {"attributes": {"OBJECTID": 12, "mukey": "100"}, "geometry": {"rings": [OUTER_CW]}}
    )
    assert feat["type"] == "Feature"
    assert feat["id"] == 12
    assert feat["properties"] == {"OBJECTID": 12, "mukey": "100"}
    assert feat["geometry"]["type"] == "Polygon"


def test_feature_without_geometry():
    feat = arcgis_to_geojson({"attributes": {"mukey": "1"}})
    assert feat["geometry"] is None
    assert "id" not in feat


def test_featurecollection():
    fc = to_featurecollection([{"attributes": {}}, {"attributes": {}}])
    assert fc["type"] == "FeatureCollection"
    assert len(fc["features"]) == 2


def test_query_url_encoding(square_polygon):
    url = build_geometry_query_url(
        "http://example.invalid/FeatureServer/4/query",
        to_query_geometry(square_polygon),
        ["mukey", "musym"],
        offset=4000,
    )
    parsed = urlparse(url)
    assert " " not in url
    qs = parse_qs(parsed.query)
    assert qs["resultOffset"] == ["4000"]
    assert qs["resultRecordCount"] == ["2000"]
    assert qs["outFields"] == ["mukey,musym"]
