from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from conductor.domain.models import ProducerRecord
from conductor.sql.ddl import TIMESTAMP_COLUMN


def build_producer_table(record: ProducerRecord) -> Table:
    """
    Build a rich table describing a registered producer's data table.

    The implicit timestamp column is listed first, as it is in the table DDL.
    """
    table = Table(
        title=f"{record.name}\n[dim]{record.id}[/dim]",
        box=box.ROUNDED,
        caption=f"{len(record.producer_schema)} registered column(s)",
    )
    table.add_column("Column", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")
    table.add_column("Store Type", style="green")

    table.add_row(TIMESTAMP_COLUMN, "[dim]implicit[/dim]", "timestamp")
    for column_name in sorted(record.producer_schema):
        data_type = record.producer_schema[column_name]
        table.add_row(column_name, data_type.value, data_type.column_type)
    return table


def print_producer(record: ProducerRecord, console: Optional[Console] = None) -> None:
    """Render a producer's schema to the terminal."""
    console = console or Console()
    console.print(build_producer_table(record))
