"""
Synthetic producer for the Conductor service.

Registers a weather-station style producer and emits deterministic
pseudo-random readings through the same orchestration the service uses.
Handy for smoke-testing a fresh store.
"""

from __future__ import annotations

import asyncio
import random
import sys
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterator, Optional

import typer

from conductor.config import get_settings
from conductor.domain.errors import ErrorCode
from conductor.domain.models import DataType, Emit, Registration, Schema
from conductor.infrastructure.db_factory import PoolManager
from conductor.orchestrator import emit, register
from conductor.producers.catalog import AsyncpgProducerCatalog
from conductor.utils.logging import configure_logging

app = typer.Typer(help="Register a synthetic producer and emit readings.")

STATION_SCHEMA: Schema = {
    "temperature": DataType.FLOAT,
    "pressure": DataType.DOUBLE,
    "humidity": DataType.INT,
    "station": DataType.STRING,
    "raining": DataType.BOOL,
    "sampled_at": DataType.TIME,
}

_STATIONS = ["north", "south", "harbour", "ridge"]


def _generate_readings(rows: int, seed: int) -> Iterator[Dict[str, Any]]:
    """Yield JSON-compatible readings matching STATION_SCHEMA."""
    rng = random.Random(seed)
    start = datetime(2024, 1, 1)
    for i in range(rows):
        yield {
            "temperature": round(rng.uniform(-20.0, 40.0), 2),
            "pressure": round(rng.uniform(950.0, 1050.0), 3),
            "humidity": rng.randint(0, 100),
            "station": rng.choice(_STATIONS),
            "raining": rng.random() < 0.2,
            "sampled_at": (start + timedelta(seconds=30 * i)).isoformat(),
        }


async def _simulate(name: str, rows: int, seed: int, custom_id: Optional[str]) -> int:
    settings = get_settings()
    manager = PoolManager()
    pool = await manager.get_async_pool()
    catalog = AsyncpgProducerCatalog(pool, catalog_table=settings.catalog_table)
    try:
        await catalog.ensure_table()
        registration = Registration(name=name, schema=STATION_SCHEMA, use_custom_id=custom_id)
        result = await register(catalog, registration)
        if result.error != ErrorCode.NO_ERROR:
            typer.echo(f"Registration failed: {result.error.identifier}", err=True)
            return 0

        typer.echo(f"Registered producer {result.id}")
        base_us = int(datetime.now(timezone.utc).timestamp() * 1_000_000)
        stored = 0
        for offset, reading in enumerate(_generate_readings(rows, seed)):
            outcome = await emit(
                catalog, Emit(uuid=result.id, timestamp=base_us + offset, data=reading)
            )
            if outcome.error == ErrorCode.NO_ERROR:
                stored += 1
            else:
                typer.echo(f"Emit {offset} failed: {outcome.error.identifier}", err=True)
        return stored
    finally:
        await manager.close()


@app.command()
def main(
    name: str = typer.Option("weather-station", "--name", "-n", help="Producer name."),
    rows: int = typer.Option(100, "--rows", "-r", help="Number of readings to emit."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    custom_id: Optional[str] = typer.Option(None, "--custom-id", help="Fixed producer id."),
) -> None:
    """
    Register the synthetic producer and emit readings.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    start = time.perf_counter()
    stored = asyncio.run(_simulate(name, rows, seed, custom_id))
    duration = time.perf_counter() - start
    typer.echo(
        f"Stored {stored:,}/{rows:,} readings in {duration:.2f}s "
        f"({stored / duration if duration > 0 else 0.0:,.0f} rows/s)."
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
