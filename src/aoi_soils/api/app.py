from __future__ import annotations

from fastapi import FastAPI

from aoi_soils.api.routes.soils import router as soils_router


def health():
    return {"status": "ok"}


app = FastAPI(title="AOI soils lookup")
app.include_router(soils_router, prefix="/api")


@app.get("/health")
def health_route():
    return health()
