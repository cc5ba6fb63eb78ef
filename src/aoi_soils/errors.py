from __future__ import annotations

from typing import Optional


class SoilsError(Exception):
    """Base class for failures in the soils lookup pipeline."""


class InvalidGeometry(SoilsError, ValueError):
    pass


class UpstreamError(SoilsError):
    """The soils FeatureServer failed, timed out, or returned an error body.

    `status` is None for network-level failures (timeouts, refused connections).
    """

    def __init__(self, message: str, status: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class ResultTooLarge(SoilsError):
    def __init__(self, limit: int) -> None:
        super().__init__(
            f"Soils result too large (>{limit} features). "
            "Reduce AOI size or implement geometry simplification."
        )
        self.limit = limit
