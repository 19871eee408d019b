"""Render records and sync results as tables, JSON, YAML, or CSV."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from portfolio_sync.models.project import ProjectRecord
from portfolio_sync.models.sync import SyncResult

console = Console()

FORMATS = ("table", "json", "yaml", "csv")

RECORD_COLUMNS = ["ID", "Title", "File", "Created"]
SYNC_COLUMNS = ["Remote Path", "Status", "Detail"]


def _plain(data: Any) -> Any:
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_plain(item) for item in data]
    return data


def make_table(
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
) -> Table:
    table = Table(title=title)
    for col in columns:
        table.add_column(col, no_wrap=False)
    for row in rows:
        table.add_row(*(escape(str(cell)) if cell is not None else "" for cell in row))
    return table


def kv_table(data: dict[str, Any], *, title: str | None = None) -> Table:
    """Render a dict as a two-column key/value table."""
    table = Table(title=title, show_header=False)
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, escape(str(value)) if value is not None else "")
    return table


def record_rows(records: Sequence[ProjectRecord]) -> list[list[Any]]:
    return [[r.id, r.title, r.file_name, r.created_at] for r in records]


def sync_rows(results: Sequence[SyncResult]) -> list[list[Any]]:
    rows = []
    for r in results:
        if r.ok:
            status = "created" if r.created else "updated"
            rows.append([r.remote_path, status, r.sha or ""])
        else:
            kind = r.kind.value if r.kind else "failed"
            rows.append([r.remote_path, kind, r.detail or ""])
    return rows


def output(
    data: Any,
    fmt: str = "table",
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
) -> None:
    """Print ``data`` in ``fmt``; tables and CSV use ``columns``/``rows`` when given."""
    if fmt == "json":
        console.print_json(json.dumps(_plain(data), indent=2, default=str))
    elif fmt == "yaml":
        import yaml

        console.print(
            yaml.safe_dump(_plain(data), default_flow_style=False, sort_keys=False),
            end="",
        )
    elif fmt == "csv" and columns and rows is not None:
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(columns)
        writer.writerows([[str(v) if v is not None else "" for v in row] for row in rows])
        console.print(buf.getvalue(), end="", markup=False)
    elif fmt == "csv":
        console.print_json(json.dumps(_plain(data), indent=2, default=str))
    elif columns and rows is not None:
        console.print(make_table(title, columns, rows))
    elif isinstance(_plain(data), dict):
        console.print(kv_table(_plain(data), title=title))
    else:
        console.print(data)
