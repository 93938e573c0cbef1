"""Build-tool operations consumed by lifecycles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from relflow.core.result import Result

__all__ = ["BuildError", "Builder"]


@dataclass(frozen=True, slots=True)
class BuildError:
    """Error from a build-tool invocation.

    Attributes:
        goals: The goals (or query) that failed, e.g. ``"clean test"``
        message: Error message
        returncode: Process return code (-1 if the tool could not start)
    """

    goals: str
    message: str
    returncode: int = 1


class Builder(Protocol):
    """Version mutation and build goals for the project."""

    def set_version(self, version: str) -> Result[None, BuildError]: ...

    def run_goals(self, goals: str) -> Result[None, BuildError]:
        """Run whitespace-separated goals (``"clean verify -Pdist"``)."""
        ...

    def clean_test(self) -> Result[None, BuildError]: ...

    def clean_install(self) -> Result[None, BuildError]: ...

    def current_project_version(self) -> Result[str, BuildError]: ...

    def has_snapshot_dependency(self) -> Result[bool, BuildError]: ...
