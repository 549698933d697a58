"""Operator commands for the directory file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from webfinger_app.config import AppConfig
from webfinger_app.directory import Directory, DirectoryStore, check_directory
from webfinger_app.errors import DirectoryUnavailable, WebfingerError
from webfinger_app.jrd import build_jrd
from webfinger_app.resolver import resolve

app = typer.Typer(help="Inspect the WebFinger directory file.", no_args_is_help=True)


def _load(config_file: Optional[Path]) -> Directory:
    path = config_file or AppConfig().config_path
    try:
        return DirectoryStore(path).get()
    except DirectoryUnavailable as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2) from e


@app.command()
def check(
    config_file: Optional[Path] = typer.Option(None, help="Path to the directory JSON file"),
):
    """Report whitelist mistakes; exit non-zero if any are found."""
    directory = _load(config_file)
    problems = check_directory(directory)
    for problem in problems:
        typer.echo(f"- {problem}")
    if problems:
        raise typer.Exit(code=1)
    typer.echo(f"OK: {len(directory.domains)} domains, {len(directory.users)} users")


@app.command()
def lookup(
    resource: str = typer.Argument(..., help="Resource, e.g. acct:user@example.com"),
    rel: Optional[list[str]] = typer.Option(None, help="Only show links with this rel"),
    config_file: Optional[Path] = typer.Option(None, help="Path to the directory JSON file"),
):
    """Print the document the server would return for RESOURCE."""
    directory = _load(config_file)
    # Queried as if on the account's own domain
    hostname = resource.partition("@")[2]
    try:
        resolved = resolve(resource, hostname, directory, dev_hosts=())
    except WebfingerError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1) from e
    typer.echo(json.dumps(build_jrd(resolved, directory, rel).to_dict(), indent=2))


def main() -> None:
    """Entry point for the ``webfinger-directory`` CLI command."""
    app()


if __name__ == "__main__":
    main()
