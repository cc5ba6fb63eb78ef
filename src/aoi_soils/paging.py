from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import requests

from aoi_soils.arcgis import build_geometry_query_params
from aoi_soils.config import (
    DEFAULT_USER_AGENT,
    MAX_FEATURES_TOTAL,
    PAGE_SIZE,
    UPSTREAM_TIMEOUT_S,
    Settings,
)
from aoi_soils.errors import ResultTooLarge, UpstreamError
from aoi_soils.geometry import QueryGeometry


logger = logging.getLogger("aoi_soils.paging")


def should_continue(page_len: int, exceeded_transfer_limit: bool, page_size: int) -> bool:
    """Decide whether another page is needed.

    Some services don't set exceededTransferLimit reliably, so a full page also
    counts as "more may exist". Stopping needs both signals to say no; a full
    final page therefore costs one extra (usually empty) request.
    An empty page always stops, even when the service still flags more.
    """

    if page_len == 0:
        return False
    return bool(exceeded_transfer_limit) or page_len >= page_size


class SoilsQueryClient:
    """Pages an ArcGIS FeatureServer intersects query until exhausted or capped."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        page_size: int = PAGE_SIZE,
        max_features: int = MAX_FEATURES_TOTAL,
        timeout_s: float = UPSTREAM_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.session = session or requests.Session()
        self.page_size = max(int(page_size), 1)
        self.max_features = int(max_features)
        self.timeout_s = float(timeout_s)
        self.user_agent = user_agent
        self.last_log_entries: List[Dict[str, Any]] = []

    @classmethod
    def from_settings(
        cls, settings: Settings, session: Optional[requests.Session] = None
    ) -> "SoilsQueryClient":
        return cls(
            session=session,
            page_size=settings.page_size,
            max_features=settings.max_features,
            timeout_s=settings.timeout_s,
            user_agent=settings.user_agent,
        )

    def close(self) -> None:
        self.session.close()

    def _get_page(self, query_url: str, params: Dict[str, str]) -> Dict[str, Any]:
        try:
            resp = self.session.get(
                query_url,
                params=params,
                timeout=self.timeout_s,
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            )
        except requests.Timeout as exc:
            raise UpstreamError(
                f"Soils upstream timed out after {self.timeout_s:g}s"
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamError(f"Soils upstream request failed: {exc}") from exc

        if not resp.ok:
            text = resp.text
            raise UpstreamError(
                f"Soils upstream failed ({resp.status_code}): {text}",
                status=resp.status_code,
                body=text,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            text = resp.text
            raise UpstreamError(
                f"Soils upstream returned non-JSON ({resp.status_code}): {text[:500]}",
                status=resp.status_code,
                body=text,
            ) from exc
        if not isinstance(data, dict):
            raise UpstreamError(
                "Soils upstream returned an unexpected payload",
                status=resp.status_code,
                body=resp.text,
            )

        # ArcGIS reports query faults as HTTP 200 with an "error" object.
        err = data.get("error")
        if err:
            err = err if isinstance(err, dict) else {"message": str(err)}
            code = err.get("code")
            details = "; ".join(str(d) for d in (err.get("details") or []) if d)
            message = err.get("message") or "unknown error"
            if details:
                message = f"{message} ({details})"
            raise UpstreamError(
                f"Soils upstream failed ({code if code is not None else resp.status_code}): {message}",
                status=code if isinstance(code, int) else resp.status_code,
                body=resp.text,
            )
        return data

    def fetch_all(
        self,
        query_url: str,
        query_geometry: QueryGeometry,
        out_fields: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """Return every feature intersecting the geometry, in upstream order.

        Pages are requested one at a time at offsets 0, page_size, 2*page_size...
        Raises ResultTooLarge as soon as the running total passes the cap,
        without requesting another page.
        """

        self.last_log_entries = []
        all_features: List[Dict[str, Any]] = []
        offset = 0

        while True:
            params = build_geometry_query_params(
                query_geometry, out_fields, offset=offset, page_size=self.page_size
            )
            start = time.perf_counter()
            data = self._get_page(query_url, params)
            page = list(data.get("features") or [])
            all_features.extend(page)
            exceeded = bool(data.get("exceededTransferLimit"))

            entry = {
                "offset": offset,
                "page_records": len(page),
                "total_records": len(all_features),
                "exceeded_transfer_limit": exceeded,
                "seconds": round(time.perf_counter() - start, 6),
            }
            self.last_log_entries.append(entry)
            logger.info(
                "soils page offset=%s records=%s total=%s exceeded=%s",
                offset,
                len(page),
                len(all_features),
                exceeded,
            )

            if len(all_features) > self.max_features:
                logger.warning(
                    "soils result over cap: %s > %s", len(all_features), self.max_features
                )
                raise ResultTooLarge(self.max_features)

            if not should_continue(len(page), exceeded, self.page_size):
                break

            offset += self.page_size

        return all_features


def fetch_all(
    query_url: str,
    query_geometry: QueryGeometry,
    out_fields: Sequence[str],
    session: Optional[requests.Session] = None,
) -> List[Dict[str, Any]]:
    """One-shot helper with the default page size, cap and timeout."""

    client = SoilsQueryClient(session=session)
    try:
        return client.fetch_all(query_url, query_geometry, out_fields)
    finally:
        if session is None:
            client.close()
