"""Package initializer for `aoi_soils`."""

from .classify import RiskFlags, classify
from .errors import InvalidGeometry, ResultTooLarge, SoilsError, UpstreamError
from .geometry import QueryGeometry, to_query_geometry
from .paging import SoilsQueryClient, fetch_all
from .service import lookup_soils
from .summarize import AggregateSummary, SoilUnit, summarize

__all__ = [
    "AggregateSummary",
    "InvalidGeometry",
    "QueryGeometry",
    "ResultTooLarge",
    "RiskFlags",
    "SoilUnit",
    "SoilsError",
    "SoilsQueryClient",
    "UpstreamError",
    "classify",
    "fetch_all",
    "lookup_soils",
    "summarize",
    "to_query_geometry",
]
