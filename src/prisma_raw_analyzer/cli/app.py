from typing import Annotated

import typer

from prisma_raw_analyzer.cli.analyze import analyze
from prisma_raw_analyzer.cli.clients import clients
from prisma_raw_analyzer.config import configure_logging

app = typer.Typer(
    name="prisma-raw-analyzer",
    help="Prisma read-after-write analyzer: find reads that may hit a lagging replica.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("analyze")(analyze)
app.command("clients")(clients)


@app.callback()
def _setup(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    configure_logging(verbose)


def main() -> None:
    app()
