"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
from pathlib import Path

import typer
from rich import print
from rich.table import Table

from .clustering.engine import cluster_objects
from .config import INITIAL_POSITION
from .errors import FieldMapError, GeometryError, MalformedObjectError
from .geometry.shapes import geometry_from_geojson, measure_geometry
from .objects.models import parse_feature_collection
from .utils.jsonio import read_json
from .utils.logging import configure_logging
from .viewport import ViewState

app = typer.Typer(help="Field mapping console: measure drawings and preview marker clusters")


@app.callback()
def _main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output")) -> None:
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (GeometryError, MalformedObjectError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except FieldMapError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except (OSError, ValueError) as exc:
            typer.echo(f"Error: cannot read input: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _geometries(document: object) -> list[tuple[str, dict]]:
    """Return ``(label, geometry)`` pairs from any GeoJSON document."""

    if not isinstance(document, dict):
        raise MalformedObjectError("Input is not a GeoJSON object")
    kind = document.get("type")
    if kind == "FeatureCollection":
        pairs = []
        for index, feature in enumerate(document.get("features") or []):
            if not isinstance(feature, dict) or not isinstance(feature.get("geometry"), dict):
                raise MalformedObjectError(f"Feature {index} has no geometry")
            pairs.append((str(feature.get("id", index)), feature["geometry"]))
        return pairs
    if kind == "Feature":
        geometry = document.get("geometry")
        if not isinstance(geometry, dict):
            raise MalformedObjectError("Feature has no geometry")
        return [(str(document.get("id", 0)), geometry)]
    return [("0", document)]


@app.command()
@_handle_errors
def measure(path: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    """Print the measurement label of every geometry in a GeoJSON file."""

    table = Table(title=str(path))
    table.add_column("Feature")
    table.add_column("Type")
    table.add_column("Measurement", justify="right")
    for label, payload in _geometries(read_json(path)):
        geometry = geometry_from_geojson(payload)
        table.add_row(label, geometry.kind, measure_geometry(geometry))
    print(table)


@app.command()
@_handle_errors
def cluster(
    path: Path = typer.Argument(..., exists=True, dir_okay=False),
    lat: float = typer.Option(INITIAL_POSITION["lat"], help="Viewport centre latitude"),
    lng: float = typer.Option(INITIAL_POSITION["lng"], help="Viewport centre longitude"),
    zoom: float = typer.Option(INITIAL_POSITION["zoom"], help="Viewport zoom level"),
    width: int = typer.Option(1024, help="Viewport width in pixels"),
    height: int = typer.Option(768, help="Viewport height in pixels"),
    no_cluster: bool = typer.Option(False, "--no-cluster", help="Render every object alone"),
) -> None:
    """Show how an object query response would be clustered on screen."""

    objects = parse_feature_collection(read_json(path))
    view = ViewState(lat, lng, zoom, width, height)
    result = cluster_objects(objects, view.project, zoom, enabled=not no_cluster)

    table = Table(title=f"{len(objects)} objects at zoom {zoom:g}")
    table.add_column("Marker")
    table.add_column("Type")
    table.add_column("Count", justify="right")
    table.add_column("Position")
    for group in result.clusters:
        table.add_row(
            "cluster",
            group.dominant_type,
            str(group.count),
            f"{group.latitude:.6f}, {group.longitude:.6f}",
        )
    for obj in result.singles:
        point = obj.representative_point()
        table.add_row(
            obj.display_name,
            obj.object_type,
            "1",
            f"{point.lat:.6f}, {point.lng:.6f}" if point is not None else "-",
        )
    print(table)
    print(f"[green]{len(result.clusters)} clusters, {len(result.singles)} single markers")


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
