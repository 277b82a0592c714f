from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from pfandfinder.api.deps import get_data_dir, get_map_renderer, load_datasets
from pfandfinder.domain.scoring import DENSITY_KEY, FILL_LEVEL_KEY
from pfandfinder.hub.dataset_registry import DEFAULT_ACTIVE, describe_file
from pfandfinder.rendering.geojson import GeoJSONMapRenderer
from pfandfinder.services.prompting import BINS_ID, DENSITY_ID

router = APIRouter(tags=["map"])

HEATMAP_LAYERS = {BINS_ID: FILL_LEVEL_KEY, DENSITY_ID: DENSITY_KEY}


def _split_ids(value: Optional[str]) -> List[str]:
    if not value:
        return list(DEFAULT_ACTIVE)
    return [item.strip().lower() for item in value.split(",") if item.strip()]


@router.get("/map")
def get_map(
    request: Request,
    datasets: Optional[str] = Query(None, description="Comma separated dataset ids"),
    focus: Optional[int] = Query(None, ge=1, description="Priority of the hotspot to center on"),
    data_dir: Optional[Path] = Depends(get_data_dir),
    renderer: GeoJSONMapRenderer = Depends(get_map_renderer),
):
    loaded = load_datasets(data_dir, _split_ids(datasets))

    renderer.clear_layers()
    points = []
    for dataset_id, dataset in loaded.items():
        info = describe_file(Path(dataset.source or dataset_id))
        renderer.render_points(dataset_id, dataset.points, {"icon": info.icon, "color": info.color})
        if dataset_id in HEATMAP_LAYERS:
            renderer.render_heatmap(f"{dataset_id}-heatmap", dataset.points, HEATMAP_LAYERS[dataset_id])
        points.extend(dataset.points)
    renderer.fit_bounds(points)

    influence = None
    if focus is not None:
        hotspot = next((h for h in request.app.state.hotspot_channel.latest if h.priority == focus), None)
        if hotspot is None:
            raise HTTPException(status_code=404, detail=f"No hotspot with priority {focus}")
        captured = []
        unsubscribe = renderer.handle.on_influence(lambda lat, lng, radius: captured.append((lat, lng, radius)))
        try:
            renderer.focus_hotspot(hotspot)
        finally:
            unsubscribe()
        lat, lng, radius = captured[-1]
        influence = {"lat": lat, "lng": lng, "radius_m": radius}

    handle = renderer.handle
    return {
        "center": list(handle.center),
        "bounds": list(handle.bounds) if handle.bounds else None,
        "layers": handle.layers,
        "markers": renderer.markers_geojson(),
        "influence": influence,
    }
