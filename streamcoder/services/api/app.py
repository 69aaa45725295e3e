from __future__ import annotations

from fastapi import FastAPI

from streamcoder.common.settings import get_settings
from streamcoder.services.api.routers import health, metadata

cfg = get_settings()


def create_app() -> FastAPI:
    app = FastAPI(
        title="streamcoder API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(metadata.router)
    return app

app = create_app()
