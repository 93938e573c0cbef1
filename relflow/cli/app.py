from __future__ import annotations

import os
from pathlib import Path

import typer

from relflow import __version__
from relflow.cli.commands.lifecycle import hotfix_finish, release_update, support_finish, support_start
from relflow.cli.commands.version_cmd import version_app
from relflow.cli.context import PROJECT_ROOT_ENV
from relflow.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    invoke_without_command=True,
    rich_markup_mode="rich",
)


# Commands
app.command("support-start")(support_start)
app.command("support-finish")(support_finish)
app.command("release-update")(release_update)
app.command("hotfix-finish")(hotfix_finish)

# Sub-apps
app.add_typer(version_app, name="version")


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    project: Path | None = typer.Option(
        None,
        "--project",
        help="Maven project root (defaults to the current directory)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if project is not None:
        try:
            root = project.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --project: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --project '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ[PROJECT_ROOT_ENV] = str(root)


def main() -> None:
    app()
