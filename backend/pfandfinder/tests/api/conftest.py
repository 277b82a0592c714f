from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from pfandfinder.api.main import create_app

DATA_DIR = Path(__file__).resolve().parents[4] / "data"

AI_TEXT = (
    "Here are the areas to prioritise.\n\n"
    "**Priority Area #1**: Coordinates (52.5163, 13.3777) - Potsdamer Platz bins near the market crowd.\n\n"
    "**Priority Area #2**: Coordinates (52.5200, 13.4050) - Alexanderplatz with the street festival."
)


class StaticGateway:
    def __init__(self, text: str) -> None:
        self.text = text
        self.calls = 0

    def complete(self, prompt):
        self.calls += 1
        return self.text


def _build_api_client(monkeypatch, *, data_dir: Path, gateway=None):
    monkeypatch.delenv("MISTRAL_API_KEY", raising=False)
    app = create_app(data_dir=data_dir, gateway=gateway)
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def gateway():
    return StaticGateway(AI_TEXT)


@pytest.fixture()
def api_client(monkeypatch, gateway):
    yield from _build_api_client(monkeypatch, data_dir=DATA_DIR, gateway=gateway)


@pytest.fixture()
def api_client_offline(monkeypatch):
    yield from _build_api_client(monkeypatch, data_dir=DATA_DIR)


@pytest.fixture()
def api_client_missing_data(tmp_path, monkeypatch):
    yield from _build_api_client(monkeypatch, data_dir=tmp_path / "missing")
