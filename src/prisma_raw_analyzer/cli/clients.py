from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from prisma_raw_analyzer.cli.analyze import build_options
from prisma_raw_analyzer.core.analyze import find_clients

console = Console()


def clients(
    project_path: Annotated[Path, typer.Argument(help="Path to the TypeScript project to scan.")],
    include: Annotated[
        str | None, typer.Option("--include", "-i", help="Comma-separated glob patterns to include.")
    ] = None,
    exclude: Annotated[
        str | None, typer.Option("--exclude", "-e", help="Comma-separated glob patterns to exclude.")
    ] = None,
) -> None:
    """List PrismaClient instances and whether they use the read replica extension."""
    try:
        instances = find_clients(build_options(project_path, include, exclude))
    except (FileNotFoundError, NotADirectoryError) as exc:
        console.print(f"[red]Scan failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    table = Table(show_lines=False)
    for header in ("name", "file", "line", "replica extension"):
        table.add_column(header)
    for instance in instances:
        replica = "yes" if instance.has_replica_extension else "no"
        table.add_row(instance.name, instance.file, str(instance.line), replica)
    console.print(table)
    console.print(f"({len(instances)} rows)")
