from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SoilsRequest(BaseModel):
    geometry: Optional[Dict[str, Any]] = None


class RiskFlagsOut(BaseModel):
    poorDrainage: bool = False
    hydricLikely: bool = False
    floodingRisk: bool = False
    pondingRisk: bool = False


class AggregateFlags(BaseModel):
    """Number of distinct map units with each flag set."""

    poorDrainage: int = 0
    hydricLikely: int = 0
    floodingRisk: int = 0
    pondingRisk: int = 0


class SoilUnitOut(BaseModel):
    mukey: Optional[Any] = None
    musym: Optional[Any] = None
    muname: Optional[Any] = None
    drclassdcd: Optional[Any] = None
    hydgrpdcd: Optional[Any] = None
    hydclprs: Optional[Any] = None
    flodfreqdcd: Optional[Any] = None
    pondfreqprs: Optional[Any] = None
    wtdepannmin: Optional[Any] = None
    wtdepaprjunmin: Optional[Any] = None
    wss_link: Optional[Any] = None
    flags: RiskFlagsOut = Field(default_factory=RiskFlagsOut)


class SoilsResponse(BaseModel):
    layer: str
    source: str
    count: int
    distinctMapUnits: int
    aggregateFlagsByMapUnit: AggregateFlags
    uniqueMapUnits: List[SoilUnitOut] = Field(default_factory=list)
    geojson: Dict[str, Any]


class SoilsHealth(BaseModel):
    status: str = "ok"
    endpoint: str = "/api/soils"
    methods: List[str] = Field(default_factory=lambda: ["GET", "POST"])
    note: str = "POST GeoJSON Polygon/MultiPolygon in { geometry: ... } to retrieve soils."
