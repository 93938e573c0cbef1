"""In-memory Vcs and Builder used by the lifecycle tests.

``FakeVcs`` models refs and the project version stored at each ref;
``FakeBuilder`` reads and writes the version of whatever is checked out.
Every call is recorded so tests can assert on what did (not) happen.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from relflow.build.protocol import BuildError
from relflow.core.config import FlowSettings
from relflow.core.messages import render_message
from relflow.core.result import Err, Ok, Result
from relflow.flow.inputs import BatchValues, InputError
from relflow.flow.orchestrator import WorkflowOrchestrator
from relflow.output.console import MockConsole
from relflow.vcs.protocol import BranchDiverged, VcsError, VcsFailure

type Call = tuple[object, ...]


@dataclass
class FakeVcs:
    local_branches: list[str] = field(default_factory=list)
    remote_branches: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    versions: dict[str, str] = field(default_factory=dict)
    dirty: bool = False
    diverged: set[str] = field(default_factory=set)
    fail: dict[str, VcsError] = field(default_factory=dict)
    current: str | None = None
    calls: list[Call] = field(default_factory=list)
    commits: list[tuple[str | None, str]] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [str(c[0]) for c in self.calls]

    def called(self, name: str) -> list[Call]:
        return [c for c in self.calls if c[0] == name]

    def _call(self, name: str, *args: object) -> VcsError | None:
        self.calls.append((name, *args))
        return self.fail.get(name)

    def find_local_branches(self, prefix: str) -> Result[list[str], VcsError]:
        if e := self._call("find_local_branches", prefix):
            return Err(e)
        return Ok([b for b in self.local_branches if b.startswith(prefix)])

    def find_remote_branches(self, remote: str, prefix: str) -> Result[list[str], VcsError]:
        if e := self._call("find_remote_branches", remote, prefix):
            return Err(e)
        return Ok([r for r in self.remote_branches if r.startswith(f"{remote}/{prefix}")])

    def find_tags(self) -> Result[list[str], VcsError]:
        if e := self._call("find_tags"):
            return Err(e)
        return Ok(list(self.tags))

    def branch_exists(self, name: str) -> Result[bool, VcsError]:
        if e := self._call("branch_exists", name):
            return Err(e)
        return Ok(name in self.local_branches)

    def tag_exists(self, name: str) -> Result[bool, VcsError]:
        if e := self._call("tag_exists", name):
            return Err(e)
        return Ok(name in self.tags)

    def checkout(self, ref: str) -> Result[None, VcsError]:
        if e := self._call("checkout", ref):
            return Err(e)
        self.current = ref
        return Ok(None)

    def create_and_checkout(self, name: str, start_point: str) -> Result[None, VcsError]:
        if e := self._call("create_and_checkout", name, start_point):
            return Err(e)
        self.local_branches.append(name)
        if start_point in self.versions:
            self.versions[name] = self.versions[start_point]
        self.current = name
        return Ok(None)

    def commit(self, template: str, properties: Mapping[str, str]) -> Result[None, VcsError]:
        message = render_message(template, properties)
        if e := self._call("commit", message):
            return Err(e)
        self.commits.append((self.current, message))
        return Ok(None)

    def tag(
        self, name: str, template: str, sign: bool, properties: Mapping[str, str]
    ) -> Result[None, VcsError]:
        if e := self._call("tag", name, render_message(template, properties), sign):
            return Err(e)
        self.tags.append(name)
        return Ok(None)

    def merge(
        self, branch: str, template: str, properties: Mapping[str, str], no_ff: bool
    ) -> Result[None, VcsError]:
        if e := self._call("merge", branch, render_message(template, properties), no_ff):
            return Err(e)
        if self.current is not None and branch in self.versions:
            self.versions[self.current] = self.versions[branch]
        return Ok(None)

    def push(self, ref: str, include_tags: bool) -> Result[None, VcsError]:
        if e := self._call("push", ref, include_tags):
            return Err(e)
        return Ok(None)

    def fetch_and_compare(self, branch: str) -> Result[None, VcsFailure]:
        if e := self._call("fetch_and_compare", branch):
            return Err(e)
        if branch in self.diverged:
            return Err(BranchDiverged(branch=branch, remote_ref=f"origin/{branch}", ahead=0, behind=2))
        return Ok(None)

    def delete_branch(self, name: str) -> Result[None, VcsError]:
        if e := self._call("delete_branch", name):
            return Err(e)
        self.local_branches.remove(name)
        return Ok(None)

    def has_uncommitted_changes(self) -> Result[bool, VcsError]:
        if e := self._call("has_uncommitted_changes"):
            return Err(e)
        return Ok(self.dirty)

    def is_valid_branch_name(self, name: str) -> bool:
        return bool(name.strip()) and ".." not in name and " " not in name


@dataclass
class FakeBuilder:
    vcs: FakeVcs
    snapshots: bool = False
    fail: dict[str, BuildError] = field(default_factory=dict)
    calls: list[Call] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [str(c[0]) for c in self.calls]

    def _call(self, name: str, *args: object) -> BuildError | None:
        self.calls.append((name, *args))
        return self.fail.get(name)

    def set_version(self, version: str) -> Result[None, BuildError]:
        if e := self._call("set_version", version):
            return Err(e)
        assert self.vcs.current is not None
        self.vcs.versions[self.vcs.current] = version
        return Ok(None)

    def run_goals(self, goals: str) -> Result[None, BuildError]:
        if e := self._call("run_goals", goals):
            return Err(e)
        return Ok(None)

    def clean_test(self) -> Result[None, BuildError]:
        if e := self._call("clean_test"):
            return Err(e)
        return Ok(None)

    def clean_install(self) -> Result[None, BuildError]:
        if e := self._call("clean_install"):
            return Err(e)
        return Ok(None)

    def current_project_version(self) -> Result[str, BuildError]:
        if e := self._call("current_project_version"):
            return Err(e)
        return Ok(self.vcs.versions.get(self.vcs.current or "", "1.0.0-SNAPSHOT"))

    def has_snapshot_dependency(self) -> Result[bool, BuildError]:
        if e := self._call("has_snapshot_dependency"):
            return Err(e)
        return Ok(self.snapshots)


@dataclass
class ScriptedValues:
    """Value source answering from fixed replies and recording the defaults offered."""

    release: str | None = None
    development: str | None = None
    tag: str | None = None
    offered: list[tuple[str, str]] = field(default_factory=list)

    def release_version(self, default: str) -> Result[str, InputError]:
        self.offered.append(("release", default))
        return Ok(self.release or default)

    def development_version(self, default: str) -> Result[str, InputError]:
        self.offered.append(("development", default))
        return Ok(self.development or default)

    def source_tag(self, tags: Sequence[str]) -> Result[str, InputError]:
        if self.tag is None:
            return Err(InputError("There are no tags."))
        return Ok(self.tag)


def make_orchestrator(
    vcs: FakeVcs,
    *,
    settings: FlowSettings | None = None,
    values: ScriptedValues | BatchValues | None = None,
    builder: FakeBuilder | None = None,
    console: MockConsole | None = None,
) -> tuple[WorkflowOrchestrator, FakeBuilder, MockConsole]:
    builder = builder or FakeBuilder(vcs)
    console = console or MockConsole()
    orchestrator = WorkflowOrchestrator(
        vcs=vcs,
        builder=builder,
        settings=settings or FlowSettings(),
        console=console,
        values=values or BatchValues(),
    )
    return orchestrator, builder, console
