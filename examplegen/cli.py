"""Command-line interface for generating example responses."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from .generate import OUTPUT_DIR, ExampleGenerationError, generate_all_examples
from .loader import SpecLoadError, get_spec_version, load_spec

app = typer.Typer(
    name="examplegen",
    help="Generate example JSON responses from an OpenAPI spec.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=logging.DEBUG if verbose else logging.INFO,
    )


@app.command()
def generate(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Directory the example files are written to."),
    ] = OUTPUT_DIR,
    spec_file: Annotated[
        Path | None,
        typer.Option("--spec", help="Read the spec from a local JSON file instead of the URL."),
    ] = None,
    refresh: Annotated[
        bool,
        typer.Option("--refresh", help="Ignore the cached spec and fetch it again."),
    ] = False,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Seed for reproducible mock values."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log schema resolution details."),
    ] = False,
) -> None:
    """Load the OpenAPI spec and write example responses for every endpoint."""
    configure_logging(verbose)

    try:
        spec = load_spec(spec_file, refresh=refresh)
    except SpecLoadError as e:
        err_console.print(f"[red]Failed to load OpenAPI spec: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✅ Loaded OpenAPI spec (version: {get_spec_version(spec)})[/green]")

    rng = random.Random(seed)
    try:
        generate_all_examples(spec, output, rng)
    except ExampleGenerationError as e:
        err_console.print(f"[red]Failed to generate examples: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"\n[green]✅ Successfully generated example responses in {output}/[/green]")
    console.print("💡 Review and update the generated examples with real API response data as needed.")


def main() -> None:
    app()
