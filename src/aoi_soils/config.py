from __future__ import annotations

import os
from dataclasses import dataclass


# Indiana SSURGO Soil Map Units (polygon layer). Must be a FeatureServer
# layer query endpoint: .../FeatureServer/<layerId>/query
DEFAULT_SOILS_QUERY_URL = (
    "https://gisdata.in.gov/server/rest/services/Hosted/"
    "Soil_Map_Units_SSURGO/FeatureServer/4/query"
)

PAGE_SIZE = 2000
MAX_FEATURES_TOTAL = 20000
UPSTREAM_TIMEOUT_S = 15.0
DEFAULT_USER_AGENT = "aoi-soils/0.1"


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = str(raw).strip()
    return v or default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(str(raw).strip())
    except ValueError:
        return default
    return v if v > 0 else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = float(str(raw).strip())
    except ValueError:
        return default
    return v if v > 0 else default


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the soils lookup.

    Resolved from the environment once and passed explicitly into the query
    engine; nothing below reads os.environ on its own.
    """

    query_url: str
    page_size: int
    max_features: int
    timeout_s: float
    user_agent: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            query_url=_env_str("SOILS_QUERY_URL", DEFAULT_SOILS_QUERY_URL),
            page_size=_env_int("SOILS_PAGE_SIZE", PAGE_SIZE),
            max_features=_env_int("SOILS_MAX_FEATURES", MAX_FEATURES_TOTAL),
            timeout_s=_env_float("SOILS_TIMEOUT_S", UPSTREAM_TIMEOUT_S),
            user_agent=_env_str("SOILS_HTTP_USER_AGENT", DEFAULT_USER_AGENT),
        )

