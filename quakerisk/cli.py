"""Command-line interface for seismic risk queries."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
import structlog

from quakerisk.config import get_config, reload_config
from quakerisk.datasets import COLLECTION_NAMES, DatasetStore
from quakerisk.errors import DatasetNotReady, QuakeRiskError
from quakerisk.risk.assessment import RiskService

logging.basicConfig(format="%(message)s", level=logging.INFO, stream=sys.stderr)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=False),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()

EXIT_INVALID = 2
EXIT_NOT_READY = 3


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _fail(error: QuakeRiskError) -> None:
    click.echo(json.dumps(error.to_dict(), ensure_ascii=False), err=True)
    sys.exit(EXIT_NOT_READY if isinstance(error, DatasetNotReady) else EXIT_INVALID)


def _service(ctx: click.Context) -> RiskService:
    if "service" not in ctx.obj:
        config = get_config()
        ctx.obj["service"] = RiskService(DatasetStore.load(config), config)
    return ctx.obj["service"]


@click.group()
@click.option("--config-dir", type=click.Path(exists=True, path_type=Path), help="Configuration directory")
@click.option("--data-dir", type=click.Path(path_type=Path), help="Directory holding the datasets")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_dir: Path | None, data_dir: Path | None, verbose: bool) -> None:
    """Seismic risk estimation from soil, faults, quakes and elevation."""
    ctx.ensure_object(dict)

    if config_dir:
        reload_config(config_dir)
    if data_dir:
        get_config().data.data_dir = str(data_dir)

    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.INFO)


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Report which datasets are loaded."""
    store = _service(ctx).store
    _echo_json({"ok": True, "data": store.status()})


@cli.command()
@click.option("--dataset", type=click.Choice(COLLECTION_NAMES), help="Only this dataset")
@click.pass_context
def summary(ctx: click.Context, dataset: str | None) -> None:
    """Feature counts of the loaded collections."""
    store = _service(ctx).store
    names = [dataset] if dataset else list(COLLECTION_NAMES)
    try:
        _echo_json({name: store.summary(name) for name in names})
    except QuakeRiskError as e:
        _fail(e)


@cli.command()
@click.option("--dataset", type=click.Choice(COLLECTION_NAMES), default="soil", show_default=True, help="Collection to dump")
@click.pass_context
def geojson(ctx: click.Context, dataset: str) -> None:
    """Dump a loaded collection as GeoJSON."""
    store = _service(ctx).store
    try:
        _echo_json(store.geojson(dataset))
    except QuakeRiskError as e:
        _fail(e)


@cli.command()
@click.option("--lat", required=True, type=float, help="Latitude in degrees")
@click.option("--lon", "--lng", "lon", required=True, type=float, help="Longitude in degrees")
@click.pass_context
def soil(ctx: click.Context, lat: float, lon: float) -> None:
    """Soil attributes at a coordinate."""
    try:
        _echo_json(_service(ctx).soil(lat, lon).to_dict())
    except QuakeRiskError as e:
        _fail(e)


@cli.command()
@click.option("--lat", required=True, type=float, help="Latitude in degrees")
@click.option("--lon", "--lng", "lon", required=True, type=float, help="Longitude in degrees")
@click.pass_context
def elevation(ctx: click.Context, lat: float, lon: float) -> None:
    """DEM elevation at a coordinate."""
    try:
        _echo_json(_service(ctx).elevation(lat, lon).to_dict())
    except QuakeRiskError as e:
        _fail(e)


@cli.command()
@click.option("--lat", required=True, type=float, help="Latitude in degrees")
@click.option("--lon", "--lng", "lon", required=True, type=float, help="Longitude in degrees")
@click.option("--radius-km", type=float, help="Quake search radius (default from config)")
@click.pass_context
def risk(ctx: click.Context, lat: float, lon: float, radius_km: float | None) -> None:
    """Seismic risk score at a coordinate."""
    service = _service(ctx)
    try:
        query = service.build_query(lat, lon, radius_km)
        result = service.evaluate(query)
    except QuakeRiskError as e:
        _fail(e)
        return

    _echo_json(result.to_dict(query.to_dict()))


if __name__ == "__main__":
    cli()
