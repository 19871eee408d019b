"""Project commands.

list, show, update, delete over the local record store.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from portfolio_sync.client.errors import RecordNotFoundError, error_handler
from portfolio_sync.commands._common import DataDirOpt, FormatOpt, make_store
from portfolio_sync.models.project import ProjectUpdate
from portfolio_sync.output.formatter import RECORD_COLUMNS, output, record_rows

app = typer.Typer(name="project", help="Manage locally stored project records.")
console = Console()


@app.command("list")
@error_handler
def list_projects(
    filter_text: Annotated[
        str | None,
        typer.Option("--filter", help="Filter by title"),
    ] = None,
    data_dir: DataDirOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """List all project records, newest first."""
    records = make_store(data_dir).read_all()
    if filter_text:
        records = [
            r for r in records
            if filter_text.lower() in (r.title or "").lower()
        ]
    if not records and fmt == "table":
        console.print("[yellow]No projects found.[/]")
        return
    output(
        [r.to_json() for r in records],
        fmt,
        columns=RECORD_COLUMNS,
        rows=record_rows(records),
        title="Projects",
    )


@app.command()
@error_handler
def show(
    project_id: Annotated[int, typer.Argument(help="Project id")],
    data_dir: DataDirOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show one project record."""
    record = make_store(data_dir).get(project_id)
    output(record.to_json(), fmt, title=f"Project: {project_id}")


@app.command()
@error_handler
def update(
    project_id: Annotated[int, typer.Argument(help="Project id")],
    title: Annotated[
        str | None,
        typer.Option("--title", "-t", help="New title"),
    ] = None,
    description: Annotated[
        str | None,
        typer.Option("--description", help="New description"),
    ] = None,
    data_dir: DataDirOpt = None,
) -> None:
    """Change the title or description of a project."""
    changes = {}
    if title is not None:
        changes["titulo"] = title
    if description is not None:
        changes["descripcion"] = description
    if not changes:
        console.print("[red]Nothing to update. Pass --title or --description.[/]")
        raise typer.Exit(1)
    if not make_store(data_dir).update(project_id, ProjectUpdate.model_validate(changes)):
        raise RecordNotFoundError(project_id)
    console.print(f"[green]Project {project_id} updated.[/]")


@app.command()
@error_handler
def delete(
    project_id: Annotated[int, typer.Argument(help="Project id")],
    force: Annotated[bool, typer.Option("--force", help="Skip confirmation")] = False,
    data_dir: DataDirOpt = None,
) -> None:
    """Delete a project record. The uploaded file and its mirror are kept."""
    store = make_store(data_dir)
    if not force:
        from rich.prompt import Confirm

        if not Confirm.ask(f"Delete project {project_id}?"):
            console.print("Cancelled.")
            return
    if not store.delete(project_id):
        raise RecordNotFoundError(project_id)
    console.print(f"[green]Project {project_id} deleted.[/]")
