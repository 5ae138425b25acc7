from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

import typer
from pydantic import ValidationError

from conductor.config import get_settings
from conductor.domain.errors import ConductorError, ErrorCode
from conductor.domain.models import DataType, Emit, Registration
from conductor.infrastructure.db_factory import PoolManager
from conductor.orchestrator import check_registered, emit, register
from conductor.producers.catalog import AsyncpgProducerCatalog, ProducerCatalog
from conductor.reporter import print_producer
from conductor.utils.logging import configure_logging

app = typer.Typer(help="Conductor producer registration and ingestion CLI.")

T = TypeVar("T")


async def _run_with_catalog(action: Callable[[ProducerCatalog], Awaitable[T]]) -> T:
    """Open the pool, run `action` against the catalog, and close the pool."""
    settings = get_settings()
    manager = PoolManager()
    pool = await manager.get_async_pool()
    try:
        return await action(AsyncpgProducerCatalog(pool, catalog_table=settings.catalog_table))
    finally:
        await manager.close()


def _parse_column(option: str) -> tuple[str, DataType]:
    name, sep, type_name = option.rpartition(":")
    if not sep or not name:
        raise typer.BadParameter(f"Expected NAME:TYPE, got '{option}'")
    for data_type in DataType:
        if data_type.value.lower() == type_name.lower():
            return name, data_type
    choices = ", ".join(dt.value for dt in DataType)
    raise typer.BadParameter(f"Unknown type '{type_name}'. Choose from: {choices}")


@app.callback()
def _configure() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"ENV={settings.app_env} | "
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"catalog={settings.catalog_table} partition_by={settings.partition_by or 'none'} "
        f"strict_identifiers={settings.strict_identifiers}"
    )


@app.command("init-catalog")
def init_catalog() -> None:
    """
    Create the producer catalog table if it does not exist.
    """

    async def _action(catalog: ProducerCatalog) -> None:
        await catalog.ensure_table()

    try:
        asyncio.run(_run_with_catalog(_action))
    except ConductorError as exc:
        typer.echo(f"Catalog initialisation failed: {exc.code.identifier}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo("Catalog table ready.")


@app.command("register")
def register_command(
    name: str = typer.Argument(..., help="Human-readable producer name."),
    column: List[str] = typer.Option(
        ...,
        "--column",
        "-c",
        help="Column as NAME:TYPE (Int, Float, Time, String, Binary, Bool, Double). Repeatable.",
    ),
    custom_id: Optional[str] = typer.Option(
        None,
        "--custom-id",
        help="Use this id instead of a generated UUID.",
    ),
) -> None:
    """
    Register a producer schema and print the registration result.
    """
    schema = dict(_parse_column(option) for option in column)
    try:
        registration = Registration(name=name, schema=schema, use_custom_id=custom_id)
    except ValidationError as exc:
        typer.echo(f"Invalid registration: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    result = asyncio.run(_run_with_catalog(lambda catalog: register(catalog, registration)))
    typer.echo(result.model_dump_json(by_alias=True))
    if result.error != ErrorCode.NO_ERROR:
        raise typer.Exit(code=1)


@app.command("emit")
def emit_command(
    producer_id: str = typer.Argument(..., help="Registered producer id."),
    data: str = typer.Option(..., "--data", "-d", help="JSON object of column values."),
    timestamp: Optional[int] = typer.Option(
        None,
        "--timestamp",
        "-t",
        help="Microseconds since the Unix epoch (default: now).",
    ),
) -> None:
    """
    Emit one record for a registered producer and print the result.
    """
    try:
        values: Dict[str, Any] = json.loads(data)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"--data is not valid JSON: {exc}") from exc
    if not isinstance(values, dict):
        raise typer.BadParameter("--data must be a JSON object")
    try:
        record = Emit(uuid=producer_id, timestamp=timestamp, data=values)
    except ValidationError as exc:
        typer.echo(f"Invalid emit: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    result = asyncio.run(_run_with_catalog(lambda catalog: emit(catalog, record)))
    typer.echo(result.model_dump_json())
    if result.error != ErrorCode.NO_ERROR:
        raise typer.Exit(code=1)


@app.command("check")
def check_command(
    producer_id: str = typer.Argument(..., help="Producer id to look up."),
) -> None:
    """
    Exit 0 if the producer is registered, 1 otherwise.
    """
    registered = asyncio.run(
        _run_with_catalog(lambda catalog: check_registered(catalog, producer_id))
    )
    if not registered:
        typer.echo(f"{producer_id} is not registered.")
        raise typer.Exit(code=1)
    typer.echo(f"{producer_id} is registered.")


@app.command("describe")
def describe_command(
    producer_id: str = typer.Argument(..., help="Producer id to describe."),
) -> None:
    """
    Show a registered producer's schema.
    """
    try:
        record = asyncio.run(_run_with_catalog(lambda catalog: catalog.lookup(producer_id)))
    except ConductorError as exc:
        typer.echo(f"Lookup failed: {exc.code.identifier}", err=True)
        raise typer.Exit(code=1) from exc
    print_producer(record)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
