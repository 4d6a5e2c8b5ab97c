from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from prisma_raw_analyzer.config import AnalyzerOptions, split_patterns
from prisma_raw_analyzer.core.analyze import run_analysis
from prisma_raw_analyzer.models import AnalysisResult

console = Console(stderr=True)


def build_options(
    project_path: Path,
    include: str | None,
    exclude: str | None,
    nested_scopes: bool = False,
) -> AnalyzerOptions:
    overrides: dict[str, object] = {"project_path": project_path, "include_nested_scopes": nested_scopes}
    if include is not None:
        overrides["include_patterns"] = split_patterns(include)
    if exclude is not None:
        overrides["exclude_patterns"] = split_patterns(exclude)
    return AnalyzerOptions.model_validate(overrides)


def _render_issues(result: AnalysisResult) -> None:
    table = Table(show_lines=False)
    for header in ("write", "read", "entity", "call chain"):
        table.add_column(header)
    for issue in result.issues:
        table.add_row(
            issue.write_operation.method.value,
            issue.read_operation.method.value,
            issue.read_operation.entity,
            " -> ".join(issue.call_chain),
        )
    console.print(table)


def analyze(
    project_path: Annotated[Path, typer.Argument(help="Path to the TypeScript project to analyze.")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write the JSON report to this file.")] = None,
    include: Annotated[
        str | None, typer.Option("--include", "-i", help="Comma-separated glob patterns to include.")
    ] = None,
    exclude: Annotated[
        str | None, typer.Option("--exclude", "-e", help="Comma-separated glob patterns to exclude.")
    ] = None,
    nested_scopes: Annotated[
        bool, typer.Option("--nested-scopes", help="Also pair operations of nested functions in enclosing ones.")
    ] = False,
) -> None:
    """Analyze a project for read-after-write issues with read replicas."""
    options = build_options(project_path, include, exclude, nested_scopes)
    try:
        result = run_analysis(options)
    except (FileNotFoundError, NotADirectoryError) as exc:
        console.print(f"[red]Analysis failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    report = result.model_dump_json(by_alias=True, indent=2)
    if output is not None:
        output.write_text(report + "\n", encoding="utf-8")
        console.print(f"[green]Results written to[/green] {output}")
    else:
        typer.echo(report)

    summary = result.summary
    if result.issues:
        _render_issues(result)
    console.print(f"Files analyzed: {summary.files_analyzed}")
    console.print(f"Issues found: {summary.total_issues}")
    console.print(f"Execution time: {summary.execution_time}")

    if summary.total_issues > 0:
        console.print(f"[yellow]{summary.total_issues} read-after-write issue(s) detected![/yellow]")
        raise typer.Exit(code=1)
    console.print("[green]No issues detected![/green]")
