from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from aoi_soils.classify import RiskFlags, classify


# Headline fields copied onto each unit for quick display.
HEADLINE_FIELDS = (
    "drclassdcd",
    "hydgrpdcd",
    "hydclprs",
    "flodfreqdcd",
    "pondfreqprs",
    "wtdepannmin",
    "wtdepaprjunmin",
    "wss_link",
)


@dataclass
class SoilUnit:
    """One distinct SSURGO map unit seen inside the AOI."""

    mukey: Optional[Any]
    musym: Optional[Any]
    muname: Optional[Any]
    drclassdcd: Optional[Any] = None
    hydgrpdcd: Optional[Any] = None
    hydclprs: Optional[Any] = None
    flodfreqdcd: Optional[Any] = None
    pondfreqprs: Optional[Any] = None
    wtdepannmin: Optional[Any] = None
    wtdepaprjunmin: Optional[Any] = None
    wss_link: Optional[Any] = None
    flags: RiskFlags = field(default_factory=RiskFlags)

    @classmethod
    def from_attributes(cls, attrs: Mapping[str, Any]) -> "SoilUnit":
        return cls(
            mukey=attrs.get("mukey"),
            musym=attrs.get("musym"),
            muname=attrs.get("muname"),
            flags=classify(attrs),
            **{name: attrs.get(name) for name in HEADLINE_FIELDS},
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "mukey": self.mukey,
            "musym": self.musym,
            "muname": self.muname,
        }
        for name in HEADLINE_FIELDS:
            out[name] = getattr(self, name)
        out["flags"] = self.flags.to_dict()
        return out


@dataclass
class AggregateSummary:
    poor_drainage: int = 0
    hydric_likely: int = 0
    flooding_risk: int = 0
    ponding_risk: int = 0

    def add(self, flags: RiskFlags) -> None:
        if flags.poor_drainage:
            self.poor_drainage += 1
        if flags.hydric_likely:
            self.hydric_likely += 1
        if flags.flooding_risk:
            self.flooding_risk += 1
        if flags.ponding_risk:
            self.ponding_risk += 1

    def to_dict(self) -> Dict[str, int]:
        return {
            "poorDrainage": self.poor_drainage,
            "hydricLikely": self.hydric_likely,
            "floodingRisk": self.flooding_risk,
            "pondingRisk": self.ponding_risk,
        }


def _text(v: object) -> str:
    return "" if v is None else str(v)


def unit_key(attrs: Mapping[str, Any]) -> str:
    # Identity is the raw (musym, muname, mukey) triple. Distinct polygons that
    # share all three collapse into one unit.
    return f"{_text(attrs.get('musym'))}|{_text(attrs.get('muname'))}|{_text(attrs.get('mukey'))}"


def _attributes_of(record: Mapping[str, Any]) -> Mapping[str, Any]:
    # GeoJSON features carry "properties", raw ArcGIS features "attributes".
    if "properties" in record:
        return record.get("properties") or {}
    if "attributes" in record:
        return record.get("attributes") or {}
    return record


def summarize(
    records: Iterable[Mapping[str, Any]],
) -> Tuple[Dict[str, SoilUnit], AggregateSummary]:
    """Fold records into distinct map units plus per-unit flag counts.

    First occurrence of a key wins; later duplicates never overwrite it and
    never bump the counters. The returned dict keeps first-seen order.
    """

    units: Dict[str, SoilUnit] = {}
    summary = AggregateSummary()
    for record in records:
        attrs = _attributes_of(record or {})
        key = unit_key(attrs)
        if key in units:
            continue
        unit = SoilUnit.from_attributes(attrs)
        units[key] = unit
        summary.add(unit.flags)
    return units, summary
