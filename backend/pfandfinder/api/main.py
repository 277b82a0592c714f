from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pfandfinder.api.routers import datasets, insights, map as map_router
from pfandfinder.hub.hotspot_channel import HotspotChannel
from pfandfinder.providers.llm.base import LLMGateway
from pfandfinder.providers.llm.mistral import resolve_gateway
from pfandfinder.rendering.geojson import GeoJSONMapRenderer
from pfandfinder.services.insight import InsightService


def create_app(data_dir: str | Path | None = None, gateway: Optional[LLMGateway] = None) -> FastAPI:
    app = FastAPI(title="Pfandfinder API", version="0.1.0")
    if data_dir is None:
        data_dir = os.getenv("DATASETS_DIR")
    app.state.data_dir = Path(data_dir) if data_dir else None
    app.state.insight_service = InsightService(gateway if gateway is not None else resolve_gateway())
    app.state.hotspot_channel = HotspotChannel()
    app.state.map_renderer = GeoJSONMapRenderer()
    app.state.map_renderer.attach(app.state.hotspot_channel)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[os.getenv("FRONTEND_ORIGIN", "http://localhost:3000")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(datasets.router, prefix="/api")
    app.include_router(insights.router, prefix="/api")
    app.include_router(map_router.router, prefix="/api")
    return app


app = create_app()
