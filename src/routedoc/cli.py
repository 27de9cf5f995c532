from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from routedoc.errors import SelectionCriteriaError
from routedoc.orchestrator.pipeline import GenerateOptions, is_selected, run_generate
from routedoc.routing import load_registry


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=False)],
        force=True,
    )


def _load(registry: str):
    try:
        return load_registry(registry)
    except (ImportError, AttributeError, ValueError, TypeError) as exc:
        raise typer.BadParameter(f"Cannot load registry {registry!r}: {exc}") from exc


@app.command()
def generate(
    registry: str = typer.Argument(..., help="Route registry as 'package.module:attribute'"),
    output: str = typer.Option("public/docs", help="The output path for the generated documentation"),
    route_prefix: Optional[str] = typer.Option(None, help="URI pattern to select routes (supports *)"),
    routes: List[str] = typer.Option([], "--routes", help="Route names to document (repeatable)"),
    no_collection: bool = typer.Option(False, "--no-collection", help="Do not write collection.json"),
    skip_type_checks: bool = typer.Option(False, help="Document untyped path parameters instead of failing"),
    full_errors: bool = typer.Option(False, help="Log full tracebacks for failed routes"),
    base_url: str = typer.Option("", envvar="ROUTEDOC_BASE_URL", help="Base URL used in examples"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every processed route"),
) -> None:
    _configure_logging(verbose)

    options = GenerateOptions(
        output_path=Path(output).expanduser(),
        allowed_names=frozenset(routes),
        uri_prefix_pattern=route_prefix,
        skip_type_checks=skip_type_checks,
        write_collection=not no_collection,
        base_url=base_url,
        full_errors=full_errors,
    )
    try:
        options.validate()
    except SelectionCriteriaError as exc:
        raise typer.BadParameter(str(exc)) from exc

    result = run_generate(_load(registry), options)

    console.print(f"[bold green]routedoc[/bold green] generate: {registry}")
    console.print(f"Routes documented: [bold]{len(result.summaries)}[/bold]")
    console.print(f"Skipped: {result.skipped}  Failed: {result.failed}")
    for s in result.summaries[:50]:
        console.print(escape(f"  {','.join(s.methods):<10} {s.uri:<35} [{s.resource_group}]"))
    if len(result.summaries) > 50:
        console.print(f"  … and {len(result.summaries) - 50} more")

    if result.preserved:
        console.print("")
        console.print(f"[bold yellow]Kept manual edits[/bold yellow] for {len(result.preserved)} route(s):")
        for s in result.preserved:
            console.print(f"  {escape(s.label())}")

    console.print("")
    console.print(f"Wrote index.md to: {result.document_path}")
    if result.collection_path:
        console.print(f"Wrote collection to: {result.collection_path}")


@app.command("routes")
def routes_list(
    registry: str = typer.Argument(..., help="Route registry as 'package.module:attribute'"),
    route_prefix: Optional[str] = typer.Option(None, help="Mark routes matching this URI pattern"),
    routes: List[str] = typer.Option([], "--routes", help="Mark routes with these names"),
) -> None:
    descriptors = _load(registry)
    options = GenerateOptions(allowed_names=frozenset(routes), uri_prefix_pattern=route_prefix)
    filtering = route_prefix is not None or bool(routes)

    table = Table(show_header=True, header_style="bold")
    table.add_column("METHODS", no_wrap=True)
    table.add_column("URI")
    table.add_column("NAME")
    table.add_column("HANDLER")
    table.add_column("STATUS", no_wrap=True)

    for d in descriptors:
        if d.is_closure_handler:
            status = "closure"
        elif filtering and not is_selected(d, options):
            status = "-"
        else:
            status = "selected" if filtering else "ok"
        table.add_row(",".join(d.methods), escape(d.uri), escape(d.name or ""), d.action_name, status)

    console.print(f"[bold]Routes:[/bold] {len(descriptors)}")
    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
