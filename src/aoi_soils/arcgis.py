from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import urlencode

from shapely.geometry import LinearRing, Point, Polygon

from aoi_soils.geometry import QueryGeometry


def build_geometry_query_params(
    query_geometry: QueryGeometry,
    out_fields: Sequence[str],
    offset: int = 0,
    page_size: int = 2000,
) -> Dict[str, str]:
    """Parameters for one page of an intersects query against a layer."""

    wkid = str(query_geometry.wkid)
    return {
        "f": "json",
        "where": "1=1",
        "geometry": json.dumps(query_geometry.to_esri(), separators=(",", ":")),
        "geometryType": "esriGeometryPolygon",
        "spatialRel": "esriSpatialRelIntersects",
        "inSR": wkid,
        "outSR": wkid,
        "returnGeometry": "true",
        "outFields": ",".join(out_fields),
        "resultRecordCount": str(int(page_size)),
        "resultOffset": str(int(offset)),
    }


def build_geometry_query_url(
    query_url: str,
    query_geometry: QueryGeometry,
    out_fields: Sequence[str],
    offset: int = 0,
    page_size: int = 2000,
) -> str:
    params = build_geometry_query_params(query_geometry, out_fields, offset, page_size)
    return f"{query_url}?{urlencode(params)}"


def _coords(seq: Sequence[Any]) -> List[List[float]]:
    out: List[List[float]] = []
    for pt in seq:
        if (
            isinstance(pt, (list, tuple))
            and len(pt) >= 2
            and isinstance(pt[0], (int, float))
            and isinstance(pt[1], (int, float))
        ):
            out.append([float(pt[0]), float(pt[1])])
    return out


def _close_ring(ring: Sequence[Any]) -> List[List[float]]:
    out = _coords(ring)
    if out and out[0] != out[-1]:
        out.append(list(out[0]))
    return out


def _rings_to_geojson(rings: Sequence[Any]) -> Optional[Dict[str, Any]]:
    # Esri: exterior rings run clockwise, holes counter-clockwise.
    # GeoJSON (RFC 7946) wants the opposite winding, so every ring is reversed.
    outers: List[List[List[List[float]]]] = []
    holes: List[List[List[float]]] = []
    for raw in rings:
        if not isinstance(raw, (list, tuple)):
            continue
        ring = _close_ring(raw)
        if len(ring) < 4:
            continue
        if LinearRing(ring).is_ccw:
            holes.append(ring[::-1])
        else:
            outers.append([ring[::-1]])

    for hole in holes:
        probe = Point(hole[0])
        for polygon in outers:
            if Polygon(polygon[0]).covers(probe):
                polygon.append(hole)
                break
        else:
            # Orphan hole: ArcGIS data with inconsistent winding. Keep it as an
            # exterior ring rather than dropping area.
            outers.append([hole[::-1]])

    if not outers:
        return None
    if len(outers) == 1:
        return {"type": "Polygon", "coordinates": outers[0]}
    return {"type": "MultiPolygon", "coordinates": outers}


def geojson_from_esri_geometry(geom: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Convert ArcGIS JSON geometry to GeoJSON.

    Handles points, multipoints, polylines and polygons. Returns None for empty
    or unrecognised geometry.
    """

    if not isinstance(geom, Mapping):
        return None

    rings = geom.get("rings")
    if isinstance(rings, list) and rings:
        return _rings_to_geojson(rings)

    paths = geom.get("paths")
    if isinstance(paths, list) and paths:
        lines = [_coords(p) for p in paths if isinstance(p, list)]
        lines = [line for line in lines if len(line) >= 2]
        if not lines:
            return None
        if len(lines) == 1:
            return {"type": "LineString", "coordinates": lines[0]}
        return {"type": "MultiLineString", "coordinates": lines}

    points = geom.get("points")
    if isinstance(points, list) and points:
        coords = _coords(points)
        return {"type": "MultiPoint", "coordinates": coords} if coords else None

    x = geom.get("x")
    y = geom.get("y")
    if isinstance(x, (int, float)) and isinstance(y, (int, float)):
        return {"type": "Point", "coordinates": [float(x), float(y)]}

    return None


def arcgis_to_geojson(feature: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert one ArcGIS feature ({geometry, attributes}) to a GeoJSON Feature."""

    attrs = dict(feature.get("attributes") or {})
    out: Dict[str, Any] = {
        "type": "Feature",
        "geometry": geojson_from_esri_geometry(feature.get("geometry")),
        "properties": attrs,
    }
    for id_field in ("OBJECTID", "FID"):
        if attrs.get(id_field) is not None:
            out["id"] = attrs[id_field]
            break
    return out


def to_featurecollection(features: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [arcgis_to_geojson(f) for f in features],
    }
