from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


RISK_WORDS = ("FREQUENT", "OCCASIONAL", "COMMON")


@dataclass(frozen=True)
class RiskFlags:
    poor_drainage: bool = False
    hydric_likely: bool = False
    flooding_risk: bool = False
    ponding_risk: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {
            "poorDrainage": self.poor_drainage,
            "hydricLikely": self.hydric_likely,
            "floodingRisk": self.flooding_risk,
            "pondingRisk": self.ponding_risk,
        }


def _as_text(v: object) -> str:
    if v is None:
        return ""
    return str(v)


def classify(attributes: Optional[Mapping[str, Any]]) -> RiskFlags:
    """Derive risk flags from SSURGO map-unit fields.

    Heuristic text matching only; fields are often null or missing depending
    on survey coverage, and a missing field reads the same as "no match".
    """

    attrs = attributes or {}
    dr = _as_text(attrs.get("drclassdcd")).upper()  # drainage class
    hydric = _as_text(attrs.get("hydclprs")).lower()  # hydric rating, Yes/No or percent
    flod = _as_text(attrs.get("flodfreqdcd")).upper()  # flooding frequency
    pond = _as_text(attrs.get("pondfreqprs")).upper()  # ponding frequency

    # "POORLY" also covers "VERY POORLY" and "SOMEWHAT POORLY".
    poor_drainage = "POORLY" in dr

    hydric_likely = (
        hydric in ("yes", "y")
        or "hydric" in hydric
        or "%" in hydric
        or "likely" in hydric
    )

    return RiskFlags(
        poor_drainage=poor_drainage,
        hydric_likely=hydric_likely,
        flooding_risk=any(w in flod for w in RISK_WORDS),
        ponding_risk=any(w in pond for w in RISK_WORDS),
    )
