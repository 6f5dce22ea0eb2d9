"""CLI entry point for spring-http-requests."""

import logging
import os
import sys
from pathlib import Path

import click

from spring_http_requests.config import load_config
from spring_http_requests.errors import GenerationError, ResolutionMiss
from spring_http_requests.generator.action import GenerateRequestsAction
from spring_http_requests.parser.catalog import load_catalog
from spring_http_requests.parser.classifier import classify
from spring_http_requests.parser.httpfile import HttpDocument, load_http_document

logger = logging.getLogger(__name__)


def _load_document(http_file: Path) -> HttpDocument:
    try:
        return load_http_document(http_file)
    except UnicodeDecodeError as e:
        raise click.ClickException(f"{http_file} is not valid UTF-8: {e}")


def _caret(document: HttpDocument, offset: int | None, line: int | None) -> int:
    """Resolve --offset/--line to a caret offset."""
    if (offset is None) == (line is None):
        raise click.UsageError("Pass exactly one of --offset or --line.")
    if offset is not None:
        return offset
    try:
        return document.offset_of_line(line)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--line")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Spring HTTP Requests — scaffold .http requests from Spring endpoints."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


@main.command()
@click.argument("http_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--catalog", "catalog_path", required=True, type=click.Path(exists=True, path_type=Path), help="Endpoint catalog (YAML or JSON).")
@click.option("--offset", type=int, default=None, help="Caret offset in the .http file.")
@click.option("--line", type=int, default=None, help="Caret line (1-based); the caret goes to the line start.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="Generator config YAML.")
@click.option("--dry-run", is_flag=True, help="Print the edits instead of writing the file.")
def generate(http_file: Path, catalog_path: Path, offset: int | None, line: int | None,
             config_path: Path | None, dry_run: bool):
    """Generate headers, query string and body for the request at the caret."""
    document = _load_document(http_file)
    caret = _caret(document, offset, line)

    try:
        action = GenerateRequestsAction(load_catalog(catalog_path), load_config(config_path))
    except GenerationError as e:
        raise click.ClickException(str(e))

    writable = dry_run or os.access(http_file, os.W_OK)
    outcome = action.perform(document.text, caret, writable=writable)
    if outcome is None:
        click.echo("Nothing generated.")
        return

    if dry_run:
        for edit in outcome.edits:
            click.echo(f"@{edit.offset}: {edit.text!r}")
        return

    with open(http_file, "w", encoding="utf-8", newline="") as f:
        f.write(outcome.text)
    click.echo(f"Generated {len(outcome.edits)} edits for {outcome.endpoint.handler or outcome.endpoint.path} in {http_file}")


@main.command()
@click.argument("http_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--offset", type=int, default=None, help="Caret offset in the .http file.")
@click.option("--line", type=int, default=None, help="Caret line (1-based).")
def check(http_file: Path, offset: int | None, line: int | None):
    """Report whether generation is available at the caret."""
    document = _load_document(http_file)
    caret = _caret(document, offset, line)

    block = document.request_at(caret)
    if block is None:
        click.echo("Generation not available at this position.")
        sys.exit(1)
    click.echo(f"Generation available for {block.method} {block.path}")


@main.command()
@click.argument("catalog_path", type=click.Path(exists=True, path_type=Path))
@click.argument("path")
@click.option("--method", default=None, help="HTTP method to match.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="Generator config YAML.")
def resolve(catalog_path: Path, path: str, method: str | None, config_path: Path | None):
    """Show how the parameters of the endpoint serving PATH are classified."""
    try:
        catalog = load_catalog(catalog_path)
        endpoint = catalog.resolve(path, method)
        config = load_config(config_path)
    except ResolutionMiss as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    except GenerationError as e:
        raise click.ClickException(str(e))

    click.echo(f"{endpoint.method or '*'} {endpoint.path} -> {endpoint.handler or '?'}")
    for param in classify(endpoint.parameters, config):
        flags = " [file]" if param.is_file_type else ""
        click.echo(f"  {param.annotation_kind.value:<5} {param.request_name}: {param.declared_type_name or '?'}{flags}")
