from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from pfandfinder.api.deps import (
    get_analysis_runner,
    get_data_dir,
    get_insight_service,
    get_map_renderer,
    load_datasets,
)
from pfandfinder.rendering.geojson import GeoJSONMapRenderer
from pfandfinder.services.analysis import AnalysisRunner
from pfandfinder.services.fallback import proximity_candidates
from pfandfinder.services.insight import InsightService
from pfandfinder.services.prompting import BINS_ID, DENSITY_ID

router = APIRouter(tags=["insights"])


class AnalysisRequest(BaseModel):
    datasets: List[str] = Field(default_factory=list)


def _active_ids(payload: AnalysisRequest) -> List[str]:
    active = [dataset_id.lower() for dataset_id in payload.datasets if dataset_id]
    if not active:
        raise HTTPException(status_code=400, detail="No datasets provided")
    return active


@router.post("/insights")
def create_insight(
    payload: AnalysisRequest,
    data_dir: Optional[Path] = Depends(get_data_dir),
    service: InsightService = Depends(get_insight_service),
):
    active = _active_ids(payload)
    insight = service.generate_insight(active, load_datasets(data_dir, active))
    return {"text": insight.text, "fallback": insight.is_fallback}


@router.post("/hotspots")
def create_hotspots(
    payload: AnalysisRequest,
    runner: AnalysisRunner = Depends(get_analysis_runner),
):
    result = runner.run(_active_ids(payload))
    return {
        "text": result.text,
        "fallback": result.is_fallback,
        "hotspots": [
            {
                "latitude": h.latitude,
                "longitude": h.longitude,
                "priority": h.priority,
                "description": h.description,
            }
            for h in result.hotspots
        ],
    }


@router.get("/hotspots/markers")
def list_hotspot_markers(renderer: GeoJSONMapRenderer = Depends(get_map_renderer)):
    return renderer.markers_geojson()


@router.get("/hotspots/scored")
def list_scored_hotspots(data_dir: Optional[Path] = Depends(get_data_dir)):
    active = [BINS_ID, DENSITY_ID]
    candidates = proximity_candidates(active, load_datasets(data_dir, active))
    return [
        {
            "lat": c.point_a.lat,
            "lng": c.point_a.lng,
            "bin_id": c.point_a.id,
            "density_id": c.point_b.id,
            "distance_km": round(c.distance_km, 4),
            "distance_deg": round(c.distance_deg, 6),
            "score": round(c.score, 4),
        }
        for c in candidates
    ]
