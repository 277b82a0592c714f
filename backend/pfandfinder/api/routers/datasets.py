from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from pfandfinder.api.deps import get_data_dir
from pfandfinder.hub.dataset_registry import FALLBACK_CATALOG, build_catalog

router = APIRouter(tags=["datasets"])


@router.get("/datasets")
def list_datasets(data_dir: Optional[Path] = Depends(get_data_dir)):
    try:
        catalog = build_catalog(data_dir)
    except OSError as exc:
        print(f"[datasets] ERROR: failed to list datasets ({exc})")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to fetch datasets",
                "datasets": [asdict(info) for info in FALLBACK_CATALOG],
            },
        )
    return {"datasets": [asdict(info) for info in catalog]}
