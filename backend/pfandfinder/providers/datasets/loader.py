from __future__ import annotations

import csv
import json
import math
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pfandfinder.domain.models import DataPoint, Dataset

SUPPORTED_EXTENSIONS = (".json", ".geojson", ".csv")
PROJECT_ROOT = Path(__file__).resolve().parents[4]
DEFAULT_DATA_DIR = Path(os.getenv("DATASETS_DIR", PROJECT_ROOT / "data"))

_LAT_KEYS = ("lat", "latitude")
_LNG_KEYS = ("lng", "lon", "long", "longitude")


def resolve_data_dir(data_dir: str | Path | None) -> Path:
    candidate = DEFAULT_DATA_DIR if data_dir is None else Path(data_dir)
    if not candidate.is_absolute():
        candidate = (Path.cwd() / candidate).resolve()
    if not candidate.exists():
        raise FileNotFoundError(f"Data directory not found: {candidate}")
    return candidate


def list_dataset_files(data_dir: str | Path | None = None) -> List[Path]:
    base_path = resolve_data_dir(data_dir)
    return sorted(
        path for path in base_path.iterdir() if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    )


def dataset_id_for(path: Path) -> str:
    return path.stem.lower()


def load_dataset(path: str | Path, dataset_id: Optional[str] = None) -> Dataset:
    path = Path(path)
    extension = path.suffix.lower()
    if extension in (".json", ".geojson"):
        records = _records_from_json(json.loads(path.read_text(encoding="utf-8")))
    elif extension == ".csv":
        records = list(_read_csv(path))
    else:
        raise ValueError(f"Unsupported file type: {extension}")
    points, skipped = normalize_records(records)
    if skipped:
        print(f"[datasets] WARNING: {path.name} skipped={skipped} records without coordinates")
    return Dataset(id=dataset_id or dataset_id_for(path), points=tuple(points), source=str(path))


def load_all(data_dir: str | Path | None = None, ids: Optional[Iterable[str]] = None) -> Dict[str, Dataset]:
    """Load every supported file in ``data_dir`` keyed by its lowercase file stem.

    Files that fail to parse are reported and left out; the caller falls back
    to canned descriptions for missing ids.
    """
    wanted = {i.lower() for i in ids} if ids is not None else None
    datasets: Dict[str, Dataset] = {}
    for path in list_dataset_files(data_dir):
        dataset_id = dataset_id_for(path)
        if wanted is not None and dataset_id not in wanted:
            continue
        try:
            datasets[dataset_id] = load_dataset(path, dataset_id)
        except (OSError, ValueError) as exc:
            print(f"[datasets] WARNING: could not load {path.name} ({exc}); skipping")
    return datasets


def normalize_records(records: Iterable[Dict[str, Any]]) -> Tuple[List[DataPoint], int]:
    points: List[DataPoint] = []
    skipped = 0
    for idx, record in enumerate(records):
        point = _to_point(record, idx)
        if point is None:
            skipped += 1
            continue
        points.append(point)
    return points, skipped


def _records_from_json(payload: Any) -> List[Dict[str, Any]]:
    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, dict)]
    if isinstance(payload, dict):
        if payload.get("type") == "FeatureCollection":
            return [_flatten_feature(f) for f in payload.get("features") or [] if isinstance(f, dict)]
        data = payload.get("data")
        if isinstance(data, list):
            return [item for item in data if isinstance(item, dict)]
    raise ValueError("JSON dataset must be an array, a {data: [...]} wrapper or a FeatureCollection")


def _flatten_feature(feature: Dict[str, Any]) -> Dict[str, Any]:
    properties = feature.get("properties")
    record = dict(properties) if isinstance(properties, dict) else {}
    if "id" in feature and "id" not in record:
        record["id"] = feature["id"]
    geometry = feature.get("geometry")
    coordinates = geometry.get("coordinates") if isinstance(geometry, dict) else None
    if isinstance(coordinates, list) and len(coordinates) >= 2:
        record["lng"], record["lat"] = coordinates[0], coordinates[1]
    return record


def _read_csv(path: Path):
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
                continue
            yield {k.strip(): (v.strip() if isinstance(v, str) else v) for k, v in row.items() if k}


def _to_point(record: Dict[str, Any], idx: int) -> Optional[DataPoint]:
    lat = _first_float(record, _LAT_KEYS)
    lng = _first_float(record, _LNG_KEYS)
    if lat is None or lng is None:
        return None
    identifier = record.get("id")
    attributes = {
        k: v for k, v in record.items() if k != "id" and k not in _LAT_KEYS and k not in _LNG_KEYS
    }
    return DataPoint(
        id=str(identifier) if identifier not in (None, "") else str(idx),
        lat=lat,
        lng=lng,
        attributes=attributes,
    )


def _first_float(record: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[float]:
    for key in keys:
        if key not in record:
            continue
        try:
            value = float(record[key])
        except (TypeError, ValueError):
            return None
        if not math.isfinite(value):
            return None
        return value
    return None
