from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

import typer

from relflow.build.maven import MavenBuilder
from relflow.core.config import FlowSettings, load_settings
from relflow.core.errors import ErrorCode
from relflow.core.result import Err
from relflow.output.console import ConsoleProtocol, RichConsole
from relflow.vcs.git import GitVcs

PROJECT_ROOT_ENV = "RELFLOW_PROJECT_ROOT"


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    settings: FlowSettings
    console: ConsoleProtocol
    vcs: GitVcs
    builder: MavenBuilder


def project_root() -> Path:
    override = os.environ.get(PROJECT_ROOT_ENV)
    if override:
        return Path(override)
    return Path.cwd()


def build_context(*, tycho_build: bool | None = None) -> CLIContext:
    root = project_root()
    if not (root / "pom.xml").is_file():
        typer.echo(f"error: no pom.xml in {root}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    settings_result = load_settings(root)
    if isinstance(settings_result, Err):
        e = settings_result.error
        where = f" ({e.path})" if e.path else ""
        typer.echo(f"error: {e.message}{where}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    settings = settings_result.value

    maven = settings.maven
    if tycho_build is not None:
        maven = replace(maven, tycho_build=tycho_build)

    return CLIContext(
        root=root,
        settings=replace(settings, maven=maven),
        console=RichConsole(),
        vcs=GitVcs(root, remote=settings.gitflow.origin),
        builder=MavenBuilder(root, maven),
    )
