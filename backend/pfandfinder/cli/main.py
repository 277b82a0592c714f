from pathlib import Path
from typing import Optional

import typer

from pfandfinder.domain.extraction import extract_hotspots
from pfandfinder.hub.dataset_registry import DEFAULT_ACTIVE, build_catalog
from pfandfinder.providers.datasets.loader import load_all
from pfandfinder.providers.llm.mistral import resolve_gateway
from pfandfinder.services.analysis import AnalysisRunner, directory_source
from pfandfinder.services.fallback import proximity_candidates
from pfandfinder.services.insight import InsightService
from pfandfinder.services.prompting import BINS_ID, DENSITY_ID

app = typer.Typer(help="CLI para analizar hotspots de residuos")


def _split_ids(value: Optional[str]) -> list[str]:
    if not value:
        return list(DEFAULT_ACTIVE)
    return [item.strip().lower() for item in value.split(",") if item.strip()]


@app.command("datasets")
def cli_datasets(
    data_dir: Optional[Path] = typer.Option(None, help="Directorio de datasets"),
):
    catalog = build_catalog(data_dir)
    if not catalog:
        typer.echo("No se encontraron datasets")
        raise typer.Exit(code=0)
    typer.echo("id\ttype\ticon")
    for info in catalog:
        typer.echo(f"{info.id}\t{info.type}\t{info.icon}")


@app.command("analyze")
def cli_analyze(
    datasets: Optional[str] = typer.Option(None, help="Datasets activos separados por comas"),
    data_dir: Optional[Path] = typer.Option(None, help="Directorio de datasets"),
    offline: bool = typer.Option(False, help="No llamar al modelo de lenguaje"),
):
    gateway = None if offline else resolve_gateway()
    runner = AnalysisRunner(InsightService(gateway), source=directory_source(data_dir))
    result = runner.run(_split_ids(datasets))
    label = "fallback" if result.is_fallback else "ai"
    typer.echo(f"[{label}] {result.text}")
    if not result.hotspots:
        typer.echo("No se encontraron hotspots")
        raise typer.Exit(code=0)
    typer.echo("priority\tlat\tlng\tdescription")
    for hs in result.hotspots:
        typer.echo(f"{hs.priority}\t{hs.latitude:.5f}\t{hs.longitude:.5f}\t{hs.description}")


@app.command("extract")
def cli_extract(
    file: Path = typer.Argument(..., help="Fichero de texto con el análisis"),
):
    hotspots = extract_hotspots(file.read_text(encoding="utf-8"))
    if not hotspots:
        typer.echo("No se encontraron hotspots")
        raise typer.Exit(code=0)
    typer.echo("priority\tlat\tlng\tdescription")
    for hs in hotspots:
        typer.echo(f"{hs.priority}\t{hs.latitude:.5f}\t{hs.longitude:.5f}\t{hs.description}")


@app.command("score")
def cli_score(
    data_dir: Optional[Path] = typer.Option(None, help="Directorio de datasets"),
    top: int = typer.Option(5, help="Número de candidatos a mostrar"),
):
    active = [BINS_ID, DENSITY_ID]
    candidates = proximity_candidates(active, load_all(data_dir, ids=active))
    if not candidates:
        typer.echo("No hay papeleras llenas cerca de zonas densas")
        raise typer.Exit(code=0)
    typer.echo("lat\tlng\tdistance_km\tscore")
    for c in candidates[:top]:
        typer.echo(f"{c.point_a.lat:.5f}\t{c.point_a.lng:.5f}\t{c.distance_km:.4f}\t{c.score:.3f}")


if __name__ == "__main__":
    app()
