from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from aoi_soils.errors import InvalidGeometry


WGS84_WKID = 4326

Ring = List[List[float]]


@dataclass(frozen=True)
class QueryGeometry:
    """AOI rings tagged with the WGS84 spatial reference.

    No reprojection happens here: the caller's lon/lat pairs are passed through
    as-is and the wkid only asserts what they already are.
    """

    rings: List[Ring]
    wkid: int = WGS84_WKID

    def to_esri(self) -> Dict[str, Any]:
        return {"rings": self.rings, "spatialReference": {"wkid": self.wkid}}


def _unwrap(obj: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    if obj.get("type") == "Feature":
        return obj.get("geometry")
    # {"geometry": {...}} without a type of its own is treated as a feature too.
    if "type" not in obj and isinstance(obj.get("geometry"), Mapping):
        return obj["geometry"]
    return obj


def _has_closed_ring(rings: List[Any]) -> bool:
    for ring in rings:
        if isinstance(ring, (list, tuple)) and len(ring) >= 4:
            return True
    return False


def to_query_geometry(geojson: Optional[Mapping[str, Any]]) -> QueryGeometry:
    """Convert a GeoJSON Polygon/MultiPolygon (or Feature) into query rings.

    MultiPolygon input uses only the first polygon's rings; the remaining
    members are ignored rather than unioned.
    """

    if not geojson:
        raise InvalidGeometry("Missing geometry")
    if not isinstance(geojson, Mapping):
        raise InvalidGeometry("Geometry must be a GeoJSON object")

    g = _unwrap(geojson)
    if not isinstance(g, Mapping):
        raise InvalidGeometry("Missing geometry")

    gtype = g.get("type")
    coords = g.get("coordinates")
    rings = None
    if gtype == "Polygon":
        rings = coords
    elif gtype == "MultiPolygon":
        if isinstance(coords, list) and coords:
            rings = coords[0]
    else:
        raise InvalidGeometry("Geometry must be Polygon or MultiPolygon")

    if not isinstance(rings, list) or not rings:
        raise InvalidGeometry(f"{gtype} geometry has no rings")
    if not all(isinstance(ring, (list, tuple)) for ring in rings):
        raise InvalidGeometry(f"{gtype} rings must be lists of positions")
    if not _has_closed_ring(rings):
        raise InvalidGeometry(f"{gtype} geometry needs a ring of at least 4 positions")

    return QueryGeometry(rings=[list(ring) for ring in rings])
