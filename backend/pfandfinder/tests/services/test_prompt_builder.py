from __future__ import annotations

from pfandfinder.domain.models import DataPoint, Dataset
from pfandfinder.services import prompting


def _bins() -> Dataset:
    return Dataset(
        id="trashcans",
        points=(
            DataPoint(id="1", lat=52.52, lng=13.405, attributes={"fillLevel": 90}),
            DataPoint(id="2", lat=52.5, lng=13.4, attributes={"fillLevel": 40}),
            DataPoint(id="3", lat=52.51, lng=13.39, attributes={"fillLevel": 75}),
        ),
    )


def _events() -> Dataset:
    return Dataset(
        id="events",
        points=(
            DataPoint(id="1", lat=52.52, lng=13.41, attributes={"name": "Festival", "attendees": "1200"}),
            DataPoint(id="2", lat=52.53, lng=13.42, attributes={"name": "", "attendees": "abc"}),
        ),
    )


def test_bins_description_counts_full_bins():
    text = prompting.describe_dataset("trashcans", _bins())
    assert text.startswith("3 public trash cans with 2 over 75% capacity.")
    assert "(52.52, 13.405) at 90% capacity" in text
    assert text.index("90% capacity") < text.index("75% capacity") < text.index("40% capacity")


def test_events_description_sums_attendance():
    text = prompting.describe_dataset("Events", _events())
    assert text.startswith("2 public events scheduled with estimated attendance of 1200 people.")
    assert "Festival at (52.52, 13.41) with 1200 attendees" in text
    assert "Unnamed event" in text


def test_density_description_lists_densest_first():
    density = Dataset(
        id="people",
        points=(
            DataPoint(id="1", lat=52.5, lng=13.4, attributes={"density": 20}),
            DataPoint(id="2", lat=52.52, lng=13.405, attributes={"density": 95}),
        ),
    )
    text = prompting.describe_dataset("people", density)
    assert text.startswith("People density data shows concentration at (52.52, 13.405) with density 95")


def test_missing_or_empty_dataset_uses_default_description():
    assert prompting.describe_dataset("trashcans", None) == prompting.DEFAULT_DESCRIPTIONS["trashcans"]
    assert prompting.describe_dataset("people", Dataset(id="people")) == prompting.DEFAULT_DESCRIPTIONS["people"]
    assert prompting.describe_dataset("parks", None) == ""


def test_prompt_includes_descriptions_and_system_role():
    prompt = prompting.build_prompt(["trashcans", "parks", "events"], {"trashcans": _bins()})
    assert prompt.system == prompting.SYSTEM_PROMPT
    assert "optimize trash collection in Berlin" in prompt.user
    assert prompting.DEFAULT_DESCRIPTIONS["events"] in prompt.user
    assert ". . " not in prompt.user
    assert [m["role"] for m in prompt.as_messages()] == ["system", "user"]


def test_coerce_int():
    assert prompting.coerce_int("250 people") == 250
    assert prompting.coerce_int(12.9) == 12
    assert prompting.coerce_int(None) == 0
    assert prompting.coerce_int("lots") == 0


def test_bins_with_equal_fill_keep_source_order():
    bins = Dataset(
        id="trashcans",
        points=tuple(
            DataPoint(id=str(i), lat=52.0 + i / 10, lng=13.0 + i / 10, attributes={"fillLevel": 80})
            for i in range(1, 5)
        ),
    )
    text = prompting.describe_dataset("trashcans", bins)
    assert text.endswith(
        "(52.1, 13.1) at 80% capacity, (52.2, 13.2) at 80% capacity, (52.3, 13.3) at 80% capacity"
    )
