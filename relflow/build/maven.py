"""Maven implementation of the ``Builder`` protocol.

Version changes go through the versions plugin (or tycho-versions for
Eclipse/Tycho builds). Goals stream their output to the terminal; the
project version is read back with ``help:evaluate``.

Usage:
    builder = MavenBuilder(Path("."), MavenConfig(executable="./mvnw"))
    builder.set_version("1.2.0")
"""

from __future__ import annotations

from pathlib import Path

from relflow.build.pom import find_snapshot_references
from relflow.build.protocol import BuildError
from relflow.core.config import MavenConfig
from relflow.core.result import Err, Ok, Result
from relflow.platform.process import run as run_process
from relflow.platform.process import run_live

__all__ = ["MavenBuilder"]

_VERSIONS_SET_GOAL = "org.codehaus.mojo:versions-maven-plugin:set"
_TYCHO_SET_GOAL = "org.eclipse.tycho:tycho-versions-plugin:set-version"
_EVALUATE_GOAL = "org.apache.maven.plugins:maven-help-plugin:evaluate"


class MavenBuilder:
    """Maven project rooted at ``path`` (the directory holding pom.xml)."""

    def __init__(self, path: Path, config: MavenConfig | None = None) -> None:
        self.path = path
        self.config = config or MavenConfig()

    @property
    def pom_path(self) -> Path:
        return self.path / "pom.xml"

    def set_version(self, version: str) -> Result[None, BuildError]:
        if self.config.tycho_build:
            goals = [_TYCHO_SET_GOAL, f"-DnewVersion={version}", "-Dtycho.mode=maven"]
        else:
            goals = [_VERSIONS_SET_GOAL, f"-DnewVersion={version}", "-DgenerateBackupPoms=false"]
        return self._live(goals)

    def run_goals(self, goals: str) -> Result[None, BuildError]:
        return self._live(goals.split())

    def clean_test(self) -> Result[None, BuildError]:
        return self._live(["clean", "test"])

    def clean_install(self) -> Result[None, BuildError]:
        return self._live(["clean", "install"])

    def current_project_version(self) -> Result[str, BuildError]:
        args = [_EVALUATE_GOAL, "-Dexpression=project.version", "-q", "-DforceStdout"]
        cmd = self._command(args)
        result = run_process(cmd, cwd=self.path)
        if isinstance(result, Err):
            e = result.error
            return Err(BuildError(goals="help:evaluate", message=e.detail, returncode=e.returncode))

        lines = [ln.strip() for ln in result.value.splitlines() if ln.strip()]
        if not lines:
            return Err(BuildError(goals="help:evaluate", message="Maven printed no project version"))
        return Ok(lines[-1])

    def has_snapshot_dependency(self) -> Result[bool, BuildError]:
        found = find_snapshot_references(self.pom_path)
        if isinstance(found, Err):
            return Err(BuildError(goals="pom.xml", message=found.error.message))
        return Ok(bool(found.value))

    def _command(self, args: list[str]) -> list[str]:
        return [self.config.executable, *self.config.args, *args]

    def _live(self, args: list[str]) -> Result[None, BuildError]:
        result = run_live(self._command(args), cwd=self.path)
        if isinstance(result, Err):
            e = result.error
            message = e.stderr.strip() or f"mvn {' '.join(args)} failed (exit {e.returncode})"
            return Err(BuildError(goals=" ".join(args), message=message, returncode=e.returncode))
        return Ok(None)
