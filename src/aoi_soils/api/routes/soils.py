from __future__ import annotations

import logging
from typing import Iterator

import requests
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse

from aoi_soils.api.schemas import SoilsHealth, SoilsRequest, SoilsResponse
from aoi_soils.config import Settings
from aoi_soils.service import lookup_soils


logger = logging.getLogger("aoi_soils.api")

router = APIRouter(tags=["soils"])

# Public, read-only data: any origin may read it.
CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def get_request_settings() -> Settings:
    return Settings.from_env()


def get_http_session() -> Iterator[requests.Session]:
    session = requests.Session()
    try:
        yield session
    finally:
        session.close()


def server_error(exc: Exception) -> PlainTextResponse:
    return PlainTextResponse(
        f"Server error: {exc}",
        status_code=500,
        media_type="text/plain;charset=UTF-8",
    )


@router.get("/soils")
def soils_health():
    return JSONResponse(SoilsHealth().model_dump())


@router.post("/soils")
async def soils_query(
    request: Request,
    settings: Settings = Depends(get_request_settings),
    session: requests.Session = Depends(get_http_session),
):
    try:
        body = await request.json()
        payload = SoilsRequest.model_validate(body or {})
        result = await run_in_threadpool(
            lookup_soils, payload.geometry, settings=settings, session=session
        )
        out = SoilsResponse.model_validate(result).model_dump()
    except Exception as exc:
        logger.warning("soils lookup failed: %s", exc)
        return server_error(exc)
    return JSONResponse(out, headers=CORS_HEADERS)


@router.api_route("/soils", methods=["PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"])
def soils_method_not_allowed():
    return PlainTextResponse("Use POST", status_code=405)
