"""Version-control operations consumed by lifecycles.

The orchestrator only sees this protocol. ``GitVcs`` implements it on top of
the git command line; tests use an in-memory fake.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from relflow.core.result import Result

__all__ = ["BranchDiverged", "Vcs", "VcsError", "VcsFailure"]


@dataclass(frozen=True, slots=True)
class VcsError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class BranchDiverged:
    """Local and remote tips of a branch disagree.

    Attributes:
        branch: Local branch name
        remote_ref: Remote-tracking ref it was compared with
        ahead: Commits only on the local branch
        behind: Commits only on the remote branch
    """

    branch: str
    remote_ref: str
    ahead: int
    behind: int

    @property
    def message(self) -> str:
        if self.ahead and self.behind:
            return f"'{self.branch}' and '{self.remote_ref}' have diverged"
        return f"remote branch '{self.remote_ref}' is ahead of '{self.branch}'"


type VcsFailure = VcsError | BranchDiverged


class Vcs(Protocol):
    """Branch, tag and commit operations on the working copy."""

    def find_local_branches(self, prefix: str) -> Result[list[str], VcsError]:
        """Local branch names starting with ``prefix``."""
        ...

    def find_remote_branches(self, remote: str, prefix: str) -> Result[list[str], VcsError]:
        """Fetch ``remote`` and list its branches starting with ``prefix``.

        Names are returned with the remote prefix (``origin/release/1.0``).
        """
        ...

    def find_tags(self) -> Result[list[str], VcsError]: ...

    def branch_exists(self, name: str) -> Result[bool, VcsError]: ...

    def tag_exists(self, name: str) -> Result[bool, VcsError]: ...

    def checkout(self, ref: str) -> Result[None, VcsError]: ...

    def create_and_checkout(self, name: str, start_point: str) -> Result[None, VcsError]: ...

    def commit(self, template: str, properties: Mapping[str, str]) -> Result[None, VcsError]:
        """Commit all tracked changes with a rendered message template."""
        ...

    def tag(
        self, name: str, template: str, sign: bool, properties: Mapping[str, str]
    ) -> Result[None, VcsError]:
        """Create an annotated (optionally GPG-signed) tag on HEAD."""
        ...

    def merge(
        self, branch: str, template: str, properties: Mapping[str, str], no_ff: bool
    ) -> Result[None, VcsError]:
        """Merge ``branch`` into the checked out branch."""
        ...

    def push(self, ref: str, include_tags: bool) -> Result[None, VcsError]: ...

    def fetch_and_compare(self, branch: str) -> Result[None, VcsFailure]:
        """Fetch ``branch`` from the remote and fail if the remote has commits
        the local branch does not."""
        ...

    def delete_branch(self, name: str) -> Result[None, VcsError]: ...

    def has_uncommitted_changes(self) -> Result[bool, VcsError]: ...

    def is_valid_branch_name(self, name: str) -> bool: ...
