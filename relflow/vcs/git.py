"""Git implementation of the ``Vcs`` protocol.

Usage:
    vcs = GitVcs(Path("/path/to/project"), remote="origin")

    match vcs.find_local_branches("release/"):
        case Ok(branches):
            print(branches)
        case Err(e):
            print(f"git {e.command} failed: {e.message}")
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from relflow.core.messages import render_message
from relflow.core.result import Err, Ok, Result
from relflow.platform.process import ProcessError
from relflow.platform.process import run as run_process
from relflow.vcs.protocol import BranchDiverged, VcsError, VcsFailure

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "ls-remote"})

__all__ = ["GitVcs"]


class GitVcs:
    """Git working copy.

    Attributes:
        path: Project root (inside a git working tree)
        remote: Name of the remote used for fetch and push
    """

    def __init__(self, path: Path, remote: str = "origin") -> None:
        self.path = path
        self.remote = remote

    def find_local_branches(self, prefix: str) -> Result[list[str], VcsError]:
        return self._list_refs(f"refs/heads/{prefix}*")

    def find_remote_branches(self, remote: str, prefix: str) -> Result[list[str], VcsError]:
        fetched = self._git(["fetch", "--quiet", remote])
        if isinstance(fetched, Err):
            return fetched
        return self._list_refs(f"refs/remotes/{remote}/{prefix}*")

    def find_tags(self) -> Result[list[str], VcsError]:
        result = self._git(
            ["for-each-ref", "--sort=*authordate", "--format=%(refname:short)", "refs/tags/"]
        )
        return result.map(_lines)

    def branch_exists(self, name: str) -> Result[bool, VcsError]:
        return self._ref_exists(f"refs/heads/{name}")

    def tag_exists(self, name: str) -> Result[bool, VcsError]:
        return self._ref_exists(f"refs/tags/{name}")

    def checkout(self, ref: str) -> Result[None, VcsError]:
        return self._git(["checkout", "--quiet", ref]).map(_none)

    def create_and_checkout(self, name: str, start_point: str) -> Result[None, VcsError]:
        return self._git(["checkout", "--quiet", "-b", name, start_point]).map(_none)

    def commit(self, template: str, properties: Mapping[str, str]) -> Result[None, VcsError]:
        message = render_message(template, properties)
        return self._git(["commit", "--quiet", "-a", "-m", message]).map(_none)

    def tag(
        self, name: str, template: str, sign: bool, properties: Mapping[str, str]
    ) -> Result[None, VcsError]:
        message = render_message(template, properties)
        mode = "-s" if sign else "-a"
        return self._git(["tag", mode, name, "-m", message]).map(_none)

    def merge(
        self, branch: str, template: str, properties: Mapping[str, str], no_ff: bool
    ) -> Result[None, VcsError]:
        message = render_message(template, properties)
        args = ["merge", "--quiet"]
        if no_ff:
            args.append("--no-ff")
        args.extend(["-m", message, branch])
        return self._git(args).map(_none)

    def push(self, ref: str, include_tags: bool) -> Result[None, VcsError]:
        args = ["push", "--quiet", "-u"]
        if include_tags:
            args.append("--follow-tags")
        args.extend([self.remote, ref])
        return self._git(args).map(_none)

    def fetch_and_compare(self, branch: str) -> Result[None, VcsFailure]:
        fetched = self._git(["fetch", "--quiet", self.remote])
        if isinstance(fetched, Err):
            return fetched

        remote_ref = f"{self.remote}/{branch}"
        exists = self._ref_exists(f"refs/remotes/{remote_ref}")
        if isinstance(exists, Err):
            return exists
        if not exists.value:
            # Never pushed: nothing to lose.
            return Ok(None)

        counted = self._git(["rev-list", "--left-right", "--count", f"{branch}...{remote_ref}"])
        if isinstance(counted, Err):
            return counted

        ahead, behind = _parse_counts(counted.value)
        if behind > 0:
            return Err(
                BranchDiverged(branch=branch, remote_ref=remote_ref, ahead=ahead, behind=behind)
            )
        return Ok(None)

    def delete_branch(self, name: str) -> Result[None, VcsError]:
        return self._git(["branch", "--quiet", "-d", name]).map(_none)

    def has_uncommitted_changes(self) -> Result[bool, VcsError]:
        result = self._git(["status", "--porcelain", "--untracked-files=no"])
        return result.map(lambda stdout: stdout.strip() != "")

    def is_valid_branch_name(self, name: str) -> bool:
        if not name.strip():
            return False
        return isinstance(self._git(["check-ref-format", "--allow-onelevel", name]), Ok)

    def _list_refs(self, pattern: str) -> Result[list[str], VcsError]:
        result = self._git(["for-each-ref", "--format=%(refname:short)", pattern])
        return result.map(_lines)

    def _ref_exists(self, ref: str) -> Result[bool, VcsError]:
        result = self._run(["show-ref", "--verify", "--quiet", ref])
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e) if e.returncode == 1:
                return Ok(False)
            case Err(e):
                return Err(_to_vcs_error("show-ref", e))

    def _git(self, args: list[str]) -> Result[str, VcsError]:
        return self._run(args).map_err(lambda e: _to_vcs_error(args[0], e))

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this working copy."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)


def _to_vcs_error(command: str, error: ProcessError) -> VcsError:
    return VcsError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or f"git {command} failed",
        returncode=error.returncode,
    )


def _lines(output: str) -> list[str]:
    return [ln.strip() for ln in output.splitlines() if ln.strip()]


def _none(_: object) -> None:
    return None


def _parse_counts(output: str) -> tuple[int, int]:
    """Parse ``rev-list --left-right --count`` output: ``<ahead>\\t<behind>``."""
    parts = output.split()
    if len(parts) != 2:
        return (0, 0)
    try:
        return (int(parts[0]), int(parts[1]))
    except ValueError:
        return (0, 0)
