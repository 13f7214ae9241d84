"""Typer-based CLI application for rummage."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from rummage import __version__
from rummage.core.assembler import info
from rummage.core.capture import collect_build_facts
from rummage.core.codegen import load_build_facts, write_build_module
from rummage.exceptions import RevisionUnavailableError

app = typer.Typer(
    name="rummage",
    help="Diagnostic snapshots of build-time and runtime facts",
    add_completion=False,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARN", "WARNING", "ERROR"]
OUTPUT_FORMATS = ["json", "yaml"]


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        typer.echo(f"rummage v{__version__}")
        raise typer.Exit()


def configure_logging(log_level: str) -> None:
    """Validate a log level name and configure root logging with it.

    Args:
        log_level: One of debug, info, warn, error (case-insensitive)

    Raises:
        typer.Exit: If the level is not recognised
    """
    log_level_upper = log_level.upper()
    if log_level_upper not in LOG_LEVELS:
        typer.echo(
            f"❌ Invalid log level: {log_level}. "
            "Must be debug, info, warn, or error.",
            err=True,
        )
        raise typer.Exit(1)

    # Map WARN to WARNING for Python logging
    if log_level_upper == "WARN":
        log_level_upper = "WARNING"

    logging.basicConfig(
        level=getattr(logging, log_level_upper),
        format="%(message)s",
    )


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
):
    """Rummage - diagnostic snapshots of build and runtime facts.

    Capture toolchain, target and package identity at build time, then
    combine them with host, CPU, command line and environment details at
    runtime.
    """
    pass


@app.command()
def capture(
    output: Annotated[
        Path, typer.Argument(help="Generated module to write (e.g. myapp/_build_info.py)")
    ],
    package_name: Annotated[
        Optional[str], typer.Option(help="Name of the host package")
    ] = None,
    package_version: Annotated[
        Optional[str], typer.Option(help="Version of the host package")
    ] = None,
    binary_name: Annotated[
        Optional[str], typer.Option(help="Name of the executable the package ships")
    ] = None,
    revision: Annotated[
        Optional[str],
        typer.Option(help="Revision descriptor <hash>[-dirty] (default: ask git)"),
    ] = None,
    source: Annotated[
        Path, typer.Option(help="Git working tree of the host package")
    ] = Path("."),
    strict_revision: Annotated[
        bool,
        typer.Option(
            "--strict-revision", help="Fail if git cannot describe the source tree"
        ),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option(
            help="Logging level (debug, info, warn, error)",
            case_sensitive=False,
            hidden=True,
        ),
    ] = "info",
):
    """Capture build-time facts into a generated Python module."""
    configure_logging(log_level)

    try:
        facts = collect_build_facts(
            package_name=package_name,
            package_version=package_version,
            binary_name=binary_name,
            revision=revision,
            source_path=source,
            strict_revision=strict_revision,
        )
    except RevisionUnavailableError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    try:
        path = write_build_module(output, facts)
    except OSError as e:
        typer.echo(f"❌ Cannot write {output}: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(f"✅ Build facts written to: {path}")
    typer.echo(f"Package:     {facts.package_name} {facts.package_version}")
    typer.echo(f"Revision:    {facts.revision or '(none)'}")
    typer.echo(f"Toolchain:   {facts.toolchain_version().semantic_version}")


@app.command()
def show(
    envvar: Annotated[
        Optional[list[str]],
        typer.Option(help="Environment variable to record (repeatable)"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format (json or yaml)", case_sensitive=False),
    ] = "json",
    build_module: Annotated[
        Optional[str],
        typer.Option(help="Dotted name of a module generated by 'rummage capture'"),
    ] = None,
    log: Annotated[
        bool,
        typer.Option(
            "--log",
            help="Also emit the snapshot as DEBUG log records (needs debug logging)",
        ),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option(
            help="Logging level (debug, info, warn, error)",
            case_sensitive=False,
            hidden=True,
        ),
    ] = "info",
):
    """Assemble a snapshot of this process and print it."""
    configure_logging(log_level)

    output_format = output_format.lower()
    if output_format not in OUTPUT_FORMATS:
        typer.echo(
            f"❌ Invalid format: {output_format}. Must be json or yaml.", err=True
        )
        raise typer.Exit(1)

    facts = None
    if build_module:
        try:
            facts = load_build_facts(build_module)
        except (ImportError, TypeError) as e:
            typer.echo(f"❌ Cannot load build facts from {build_module}: {e}", err=True)
            raise typer.Exit(1) from e
        if facts is None:
            typer.echo(f"❌ Build facts module not found: {build_module}", err=True)
            raise typer.Exit(1)

    snapshot = info(facts).with_envvars(envvar or [])

    if output_format == "yaml":
        typer.echo(snapshot.to_yaml(), nl=False)
    else:
        typer.echo(snapshot.to_json())

    if log:
        snapshot.log_debug()
