from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from pfandfinder.providers.datasets.loader import dataset_id_for, list_dataset_files

DEFAULT_ACTIVE = ("trashcans", "people")

# (substrings, icon, color) checked in order; first hit wins
_STYLE_RULES = (
    (("trash", "abfall", "müll"), "Trash2", "bg-red-500"),
    (("event", "veranstaltung"), "Calendar", "bg-blue-500"),
    (("park", "green", "grün"), "Trees", "bg-green-500"),
    (("people", "person", "density", "dichte"), "Users", "bg-amber-500"),
)


@dataclass(frozen=True)
class DatasetInfo:
    id: str
    name: str
    icon: str
    color: str
    path: Optional[str] = None
    type: Optional[str] = None


FALLBACK_CATALOG = (
    DatasetInfo(id="trashcans", name="Trash Cans", icon="Trash2", color="bg-red-500"),
    DatasetInfo(id="events", name="Events", icon="Calendar", color="bg-blue-500"),
    DatasetInfo(id="people", name="People Density", icon="Users", color="bg-amber-500"),
)


def describe_file(path: Path) -> DatasetInfo:
    dataset_id = dataset_id_for(path)
    icon, color = "File", "bg-gray-500"
    for needles, rule_icon, rule_color in _STYLE_RULES:
        if any(needle in dataset_id for needle in needles):
            icon, color = rule_icon, rule_color
            break
    stem = path.stem
    return DatasetInfo(
        id=dataset_id,
        name=stem[:1].upper() + stem[1:],
        icon=icon,
        color=color,
        path=str(path),
        type=path.suffix.lower(),
    )


def build_catalog(data_dir: str | Path | None = None) -> List[DatasetInfo]:
    return [describe_file(path) for path in list_dataset_files(data_dir)]


class DatasetSelection:
    """Tracks which datasets are active; toggling keeps insertion order."""

    def __init__(self, active: Optional[Iterable[str]] = None, available: Optional[Iterable[str]] = None) -> None:
        self._active: List[str] = []
        for dataset_id in DEFAULT_ACTIVE if active is None else active:
            key = dataset_id.lower()
            if key not in self._active:
                self._active.append(key)
        self._available: List[str] = [a.lower() for a in available] if available is not None else []

    @property
    def active(self) -> List[str]:
        return list(self._active)

    @property
    def available(self) -> List[str]:
        return list(self._available)

    def set_available(self, dataset_ids: Iterable[str]) -> None:
        self._available = [dataset_id.lower() for dataset_id in dataset_ids]

    def is_active(self, dataset_id: str) -> bool:
        return dataset_id.lower() in self._active

    def toggle(self, dataset_id: str) -> bool:
        """Flip ``dataset_id`` and return whether it is active afterwards."""
        key = dataset_id.lower()
        if key in self._active:
            self._active.remove(key)
            return False
        self._active.append(key)
        return True
