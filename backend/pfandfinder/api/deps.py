from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional

from fastapi import Depends, HTTPException, Request

from pfandfinder.domain.models import Dataset
from pfandfinder.providers.datasets.loader import load_all
from pfandfinder.rendering.geojson import GeoJSONMapRenderer
from pfandfinder.services.analysis import AnalysisRunner
from pfandfinder.services.insight import InsightService


def get_data_dir(request: Request) -> Optional[Path]:
    return getattr(request.app.state, "data_dir", None)


def get_insight_service(request: Request) -> InsightService:
    service = getattr(request.app.state, "insight_service", None)
    if service is None:
        raise HTTPException(status_code=500, detail="Insight service not configured")
    return service


def get_map_renderer(request: Request) -> GeoJSONMapRenderer:
    renderer = getattr(request.app.state, "map_renderer", None)
    if renderer is None:
        raise HTTPException(status_code=500, detail="Map renderer not configured")
    return renderer


def get_analysis_runner(
    request: Request,
    data_dir: Optional[Path] = Depends(get_data_dir),
    service: InsightService = Depends(get_insight_service),
) -> AnalysisRunner:
    return AnalysisRunner(
        service,
        channel=request.app.state.hotspot_channel,
        source=lambda ids: load_datasets(data_dir, ids),
    )


def load_datasets(data_dir: Optional[Path], ids: Iterable[str]) -> Dict[str, Dataset]:
    try:
        return load_all(data_dir, ids=ids)
    except FileNotFoundError as exc:
        print(f"[datasets] WARNING: {exc}; continuing without datasets")
        return {}
