from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from aoi_soils.arcgis import to_featurecollection
from aoi_soils.config import Settings
from aoi_soils.geometry import to_query_geometry
from aoi_soils.paging import SoilsQueryClient
from aoi_soils.summarize import summarize


logger = logging.getLogger("aoi_soils.service")

LAYER_NAME = "soils"
MAX_UNITS_IN_RESPONSE = 50

# Broad SSURGO map-unit fields. Services lacking some of them return nulls.
OUT_FIELDS = (
    "mukey",
    "musym",
    "muname",
    "hydgrpdcd",
    "hydclprs",
    "drclassdcd",
    "wtdepannmin",
    "wtdepaprjunmin",
    "flodfreqdcd",
    "pondfreqprs",
    "engstafdcd",
    "engstafll",
    "engstafml",
    "wss_link",
)


def lookup_soils(
    geometry: Optional[Mapping[str, Any]],
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
    client: Optional[SoilsQueryClient] = None,
) -> Dict[str, Any]:
    """Run the AOI soils pipeline and build the response payload.

    Any failure propagates; there is no partial result.
    """

    settings = settings or Settings.from_env()
    query_geometry = to_query_geometry(geometry)

    owns_client = client is None
    if client is None:
        client = SoilsQueryClient.from_settings(settings, session=session)
    try:
        arc_features = client.fetch_all(settings.query_url, query_geometry, OUT_FIELDS)
    finally:
        if owns_client and session is None:
            client.close()

    geojson = to_featurecollection(arc_features)
    units, agg = summarize(geojson["features"])
    logger.info(
        "soils lookup: %s features, %s distinct map units",
        len(arc_features),
        len(units),
    )

    return {
        "layer": LAYER_NAME,
        "source": settings.query_url,
        "count": len(geojson["features"]),
        "distinctMapUnits": len(units),
        "aggregateFlagsByMapUnit": agg.to_dict(),
        "uniqueMapUnits": [u.to_dict() for u in list(units.values())[:MAX_UNITS_IN_RESPONSE]],
        "geojson": geojson,
    }
