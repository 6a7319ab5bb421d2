"""CLI entry point for abi-openapi."""

import json
import sys
from pathlib import Path
from typing import NoReturn

import click

from abi_openapi.assembler import AssemblyResult, OverloadPolicy, assemble
from abi_openapi.config import Settings, load_settings
from abi_openapi.errors import AbiOpenApiError
from abi_openapi.logging import configure_logging
from abi_openapi.mapper import map_type
from abi_openapi.parser.artifact import load_artifact, read_artifact
from abi_openapi.parser.base import AbiEntry, TypeDescriptor
from abi_openapi.schema import Diagnostic
from abi_openapi.server import DOCS_PATH, SPEC_PATH, serve as serve_docs
from abi_openapi.writer import write_document

OVERLOAD_CHOICES = [p.value for p in OverloadPolicy]


def _load_entries(contract: str | None, abi_path: Path | None, settings: Settings) -> tuple[str, list[AbiEntry]]:
    """Load ABI entries from an explicit file or the artifacts directory."""
    if abi_path is not None:
        name, entries = load_artifact(abi_path)
        return contract or name or abi_path.stem, entries
    return contract, read_artifact(settings.artifacts_dir, contract)


def _build(contract: str | None, abi_path: Path | None, settings: Settings) -> tuple[str, AssemblyResult]:
    if abi_path is None and not contract:
        raise click.UsageError("Pass --contract, or --abi with an ABI file.")
    name, entries = _load_entries(contract, abi_path, settings)
    click.echo(f"Contract: {name} ({len(entries)} ABI entries)")
    result = assemble(
        entries,
        name,
        settings.title,
        overloads=settings.overloads,
        max_depth=settings.max_depth,
    )
    _report(result.diagnostics)
    return name, result


def _report(diagnostics: list[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        click.secho(f"  warning: {diagnostic}", fg="yellow", err=True)


def _fail(exc: Exception) -> NoReturn:
    click.secho(f"Error generating OpenAPI spec: {exc}", fg="red", err=True)
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """ABI OpenAPI: generate API documentation from smart-contract ABIs."""
    configure_logging(verbose=verbose)


@main.command()
@click.option("-c", "--contract", default=None, help="Contract name.")
@click.option("--abi", "abi_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Artifact or ABI file to read instead of the artifacts directory.")
@click.option("--artifacts", "artifacts_dir", default=None, type=click.Path(path_type=Path), help="Compiled artifacts directory.")
@click.option("--title", default=None, help="Title appended to the contract name.")
@click.option("-o", "--output", "output_dir", default=None, type=click.Path(path_type=Path), help="Output directory for the document.")
@click.option("--format", "fmt", default=None, type=click.Choice(["json", "yaml"]), help="Document format.")
@click.option("--overloads", default=None, type=click.Choice(OVERLOAD_CHOICES), help="How to handle overloaded functions.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML config file.")
def generate(contract, abi_path, artifacts_dir, title, output_dir, fmt, overloads, config_path):
    """Generate an OpenAPI document from a contract ABI."""
    try:
        settings = load_settings(
            config_path,
            artifacts_dir=artifacts_dir,
            title=title,
            output_dir=output_dir,
            format=fmt,
            overloads=overloads,
        )
        name, result = _build(contract, abi_path, settings)
        path = write_document(result.document.to_openapi(), settings.output_dir, name, settings.format)
    except (AbiOpenApiError, OSError) as e:
        _fail(e)

    click.secho("✓ Generated API specification", fg="green")
    operations = sum(len(verbs) for verbs in result.document.paths.values())
    click.echo(f"Wrote {operations} operations to {path}")


@main.command()
@click.option("-c", "--contract", default=None, help="Contract name.")
@click.option("--abi", "abi_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Artifact or ABI file to read instead of the artifacts directory.")
@click.option("--artifacts", "artifacts_dir", default=None, type=click.Path(path_type=Path), help="Compiled artifacts directory.")
@click.option("--title", default=None, help="Title appended to the contract name.")
@click.option("--overloads", default=None, type=click.Choice(OVERLOAD_CHOICES), help="How to handle overloaded functions.")
@click.option("--host", default=None, help="Interface to bind.")
@click.option("--port", default=None, type=int, help="Port to listen on.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML config file.")
def serve(contract, abi_path, artifacts_dir, title, overloads, host, port, config_path):
    """Serve interactive Swagger UI docs for a contract."""
    try:
        settings = load_settings(
            config_path,
            artifacts_dir=artifacts_dir,
            title=title,
            overloads=overloads,
            host=host,
            port=port,
        )
        name, result = _build(contract, abi_path, settings)
    except AbiOpenApiError as e:
        _fail(e)

    base = f"http://{settings.host}:{settings.port}"
    click.echo(f"Interactive Swagger UI running at {base}{DOCS_PATH}")
    click.echo(f"OpenAPI spec available at {base}{SPEC_PATH}")
    serve_docs(result.document.to_openapi(), name, host=settings.host, port=settings.port)


@main.command()
@click.argument("raw_type")
@click.option("--components", default=None, help="JSON list of tuple components.")
def types(raw_type: str, components: str | None):
    """Show the schema a single Solidity type maps to."""
    try:
        descriptor = TypeDescriptor(type=raw_type, components=json.loads(components) if components else None)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="RAW_TYPE") from e

    try:
        result = map_type(descriptor)
    except AbiOpenApiError as e:
        raise click.ClickException(str(e)) from e
    _report(list(result.diagnostics))
    click.echo(json.dumps(result.schema_node.to_openapi(), indent=2))
