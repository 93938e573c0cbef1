"""Version arithmetic without touching a project: ``relflow version next 1.2.3``."""

from __future__ import annotations

import typer

from relflow.core.errors import ErrorCode
from relflow.core.result import Err
from relflow.core.version import VersionInfo, parse_version
from relflow.output.console import RichConsole

version_app = typer.Typer(add_completion=False, no_args_is_help=True)


def _parse_or_exit(raw: str) -> VersionInfo:
    parsed = parse_version(raw)
    if isinstance(parsed, Err):
        RichConsole().error(parsed.error.message)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return parsed.value


@version_app.command("next")
def next_version(
    version: str = typer.Argument(..., help="Current version, e.g. 1.2.3 or 1.0-RC1"),
    digit: int | None = typer.Option(
        None, "--digit", min=0, help="Zero-based component to increment.", show_default=False
    ),
    digits_only: bool = typer.Option(False, "--digits-only", help="Drop non-numeric qualifiers."),
) -> None:
    """Print the next development (-SNAPSHOT) version."""
    info = _parse_or_exit(version)
    if digits_only:
        info = info.digits_version_info()
    typer.echo(info.next_snapshot_version(digit))


@version_app.command("release")
def release_version(
    version: str = typer.Argument(..., help="Version to release, e.g. 1.2.3-SNAPSHOT"),
) -> None:
    """Print the numeric release form of a version."""
    typer.echo(_parse_or_exit(version).release_version_string())
