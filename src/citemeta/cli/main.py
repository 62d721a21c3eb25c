"""Command-line interface for citemeta.

Provides CLI commands for converting package citations to schema.org JSON.
"""

import importlib.metadata
import json
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import Any

import click

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("citemeta")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.3.0"  # Fallback for development


def _open_events(events: str | None) -> Any:
    from citemeta.audit import AuditLogger

    return AuditLogger(Path(events)) if events else nullcontext(None)


def _emit(citations: list[dict[str, Any]] | None, output: str | None) -> None:
    from citemeta import write_json

    if output:
        write_json(citations, output)
        click.secho(f"✓ Wrote {len(citations or [])} citation(s) to {output}", fg="green")
    else:
        click.echo(json.dumps(citations or [], ensure_ascii=False, indent=2))


@click.group()
@click.version_option(version=__version__, prog_name="citemeta")
def cli() -> None:
    """Schema.org citation metadata for software packages.

    Use 'citemeta COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("package")
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Output JSON file path (default: standard output)",
)
@click.option(
    "--events",
    type=click.Path(),
    default=None,
    help="Append audit events to this JSONL file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def citation(package: str, output: str | None, events: str | None, verbose: bool) -> None:
    """Convert the citations of PACKAGE to schema.org JSON.

    PACKAGE is a package source directory (holding inst/CITATION, CITATION
    or CITATION.bib and optionally DESCRIPTION) or the name of an installed
    distribution.

    Examples
    --------
        citemeta citation path/to/pkg -o citation.json
        citemeta citation click
    """
    from citemeta import guess_citation

    if verbose:
        click.echo(f"Resolving citations for: {package}", err=True)

    try:
        with _open_events(events) as audit_logger:
            citations = guess_citation(package, audit_logger=audit_logger)
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    if citations is None:
        click.secho(f"No citation available for {package}", fg="yellow", err=True)
    elif verbose:
        click.echo(f"Found {len(citations)} citation(s)", err=True)

    _emit(citations, output)


@cli.command()
@click.argument("citation_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--encoding",
    "-e",
    default=None,
    help="File encoding (default: UTF-8)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Output JSON file path (default: standard output)",
)
@click.option(
    "--events",
    type=click.Path(),
    default=None,
    help="Append audit events to this JSONL file",
)
def read(citation_file: str, encoding: str | None, output: str | None, events: str | None) -> None:
    """Convert every entry of CITATION_FILE to schema.org JSON.

    CITATION_FILE is an R CITATION file or a BibTeX file.

    Examples
    --------
        citemeta read inst/CITATION --encoding latin1
        citemeta read CITATION.bib -o citation.json
    """
    from citemeta import citations_from_file

    try:
        with _open_events(events) as audit_logger:
            citations = citations_from_file(
                citation_file, encoding=encoding, audit_logger=audit_logger
            )
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    _emit(citations, output)


if __name__ == "__main__":
    cli()
