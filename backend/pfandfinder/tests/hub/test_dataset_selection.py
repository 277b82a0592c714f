from __future__ import annotations

import json

import pytest

from pfandfinder.hub.dataset_registry import DEFAULT_ACTIVE, DatasetSelection, build_catalog, describe_file


def test_defaults_to_bins_and_density():
    selection = DatasetSelection()
    assert selection.active == list(DEFAULT_ACTIVE)
    assert selection.is_active("TRASHCANS")


def test_toggle_flips_and_keeps_order():
    selection = DatasetSelection(active=["trashcans"])
    assert selection.toggle("Events") is True
    assert selection.active == ["trashcans", "events"]
    assert selection.toggle("trashcans") is False
    assert selection.active == ["events"]
    assert not selection.is_active("trashcans")


def test_duplicate_initial_ids_collapse():
    assert DatasetSelection(active=["People", "people"]).active == ["people"]


def test_available_ids_are_lowercased():
    selection = DatasetSelection(active=[])
    selection.set_available(["Trashcans", "Events"])
    assert selection.available == ["trashcans", "events"]


def test_catalog_assigns_icons_by_name(tmp_path):
    (tmp_path / "trashcans.json").write_text(json.dumps([]))
    (tmp_path / "events.csv").write_text("id,lat,lng\n")
    (tmp_path / "benches.json").write_text(json.dumps([]))

    catalog = {info.id: info for info in build_catalog(tmp_path)}

    assert set(catalog) == {"trashcans", "events", "benches"}
    assert (catalog["trashcans"].icon, catalog["trashcans"].color) == ("Trash2", "bg-red-500")
    assert catalog["events"].type == ".csv"
    assert catalog["benches"].icon == "File"
    assert catalog["benches"].name == "Benches"


def test_describe_file_density_style(tmp_path):
    info = describe_file(tmp_path / "people_density.json")
    assert (info.id, info.icon) == ("people_density", "Users")


def test_catalog_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_catalog(tmp_path / "nope")
