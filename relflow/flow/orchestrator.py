"""Runs a lifecycle against a working copy.

One linear runner serves every lifecycle: the descriptor lists the steps,
``_LifecycleRun`` implements them, and the loop threads an immutable
``RunState`` through them. Options switch individual steps off; a disabled
step is neither announced nor recorded.

The first failing step ends the run. Nothing already done is rolled back:
the returned ``FlowError`` names the step so the user can finish by hand.

Usage:
    orchestrator = WorkflowOrchestrator(
        vcs=GitVcs(root), builder=MavenBuilder(root), settings=settings,
        console=RichConsole(), values=BatchValues(),
    )
    result = orchestrator.run(RELEASE_UPDATE, options)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from relflow.build.protocol import Builder, BuildError
from relflow.core.config import FlowSettings
from relflow.core.result import Err, Ok, Result
from relflow.core.version import (
    SNAPSHOT_SUFFIX,
    VersionInfo,
    is_snapshot_version,
    parse_version,
    strip_snapshot,
)
from relflow.flow.errors import FlowError, StepFailure
from relflow.flow.inputs import InputError, ValueSource
from relflow.flow.lifecycles import Lifecycle, StepName
from relflow.flow.options import FlowOptions, validate_options
from relflow.output.console import ConsoleProtocol
from relflow.vcs.protocol import BranchDiverged, Vcs, VcsFailure

__all__ = ["FlowOutcome", "RunState", "WorkflowOrchestrator"]


@dataclass(frozen=True, slots=True)
class RunState:
    """Values produced by earlier steps and consumed by later ones."""

    branch: str | None = None
    source_tag: str | None = None
    current_version: str | None = None
    release_version: str | None = None
    pending_version: str | None = None
    tag: str | None = None
    development_version: str | None = None
    push_refs: tuple[str, ...] = ()
    pushed: tuple[str, ...] = ()
    steps: tuple[StepName, ...] = ()


@dataclass(frozen=True, slots=True)
class FlowOutcome:
    lifecycle: str
    branch: str | None
    release_version: str | None
    tag: str | None
    development_version: str | None
    pushed: tuple[str, ...]
    steps: tuple[StepName, ...]


type StepResult = Result[RunState, StepFailure]


class WorkflowOrchestrator:
    def __init__(
        self,
        *,
        vcs: Vcs,
        builder: Builder,
        settings: FlowSettings,
        console: ConsoleProtocol,
        values: ValueSource,
    ) -> None:
        self.vcs = vcs
        self.builder = builder
        self.settings = settings
        self.console = console
        self.values = values

    def run(self, lifecycle: Lifecycle, options: FlowOptions) -> Result[FlowOutcome, FlowError]:
        problem = validate_options(options)
        if problem is not None:
            return Err(
                FlowError(kind="config", lifecycle=lifecycle.name, step="validate", message=problem)
            )

        run = _LifecycleRun(self, lifecycle, options)
        state = RunState()
        for step in lifecycle.steps:
            if not run.enabled(step, state):
                continue
            self.console.step(step)
            outcome = run.handler(step)(state)
            if isinstance(outcome, Err):
                failure = outcome.error
                return Err(
                    FlowError(
                        kind=failure.kind,
                        lifecycle=lifecycle.name,
                        step=step,
                        message=failure.message,
                        hint=failure.hint,
                    )
                )
            state = replace(outcome.value, steps=(*outcome.value.steps, step))

        return Ok(
            FlowOutcome(
                lifecycle=lifecycle.name,
                branch=state.branch,
                release_version=state.release_version,
                tag=state.tag,
                development_version=state.development_version,
                pushed=state.pushed,
                steps=state.steps,
            )
        )


def _vcs_failure(error: VcsFailure) -> StepFailure:
    if isinstance(error, BranchDiverged):
        return StepFailure(kind="divergence", message=error.message, hint=f"Run: git pull on {error.branch}")
    return StepFailure(kind="external", message=f"git {error.command}: {error.message}")


def _build_failure(error: BuildError) -> StepFailure:
    return StepFailure(kind="build", message=f"{error.goals}: {error.message}")


def _input_failure(error: InputError) -> StepFailure:
    return StepFailure(kind="precondition", message=error.message)


class _LifecycleRun:
    """Step implementations bound to one lifecycle and one set of options."""

    def __init__(self, owner: WorkflowOrchestrator, lifecycle: Lifecycle, options: FlowOptions) -> None:
        self.vcs = owner.vcs
        self.builder = owner.builder
        self.console = owner.console
        self.values = owner.values
        self.gitflow = owner.settings.gitflow
        self.messages = owner.settings.messages
        self.lifecycle = lifecycle
        self.options = options

    @property
    def kind(self) -> str:
        return self.lifecycle.branch_kind

    def handler(self, step: StepName) -> Callable[[RunState], StepResult]:
        return getattr(self, f"_step_{step}")

    def enabled(self, step: StepName, state: RunState) -> bool:
        o = self.options
        match step:
            case "check_snapshots":
                return not o.allow_snapshots
            case "sync_remote":
                return o.fetch_remote
            case "test":
                return not o.skip_test_project
            case "pre_goals":
                return o.pre_goals is not None
            case "post_goals":
                return o.post_goals is not None
            case "commit_release":
                return state.pending_version is not None
            case "tag":
                return not o.skip_tag
            case "install":
                return o.install_project
            case "merge_development":
                return not self.gitflow.same_prod_dev_name
            case "push":
                return o.push_remote
            case _:
                return True

    # -- steps -------------------------------------------------------------

    def _step_check_uncommitted(self, state: RunState) -> StepResult:
        dirty = self.vcs.has_uncommitted_changes()
        if isinstance(dirty, Err):
            return Err(_vcs_failure(dirty.error))
        if dirty.value:
            return Err(
                StepFailure(
                    kind="precondition",
                    message="You have some uncommitted files.",
                    hint="Commit or discard local changes in order to proceed.",
                )
            )
        return Ok(state)

    def _step_resolve_tag(self, state: RunState) -> StepResult:
        tag = self.options.source_tag
        if tag is None:
            tags = self.vcs.find_tags()
            if isinstance(tags, Err):
                return Err(_vcs_failure(tags.error))
            chosen = self.values.source_tag(tags.value)
            if isinstance(chosen, Err):
                return Err(_input_failure(chosen.error))
            tag = chosen.value
        tag = tag.strip()

        exists = self.vcs.tag_exists(tag)
        if isinstance(exists, Err):
            return Err(_vcs_failure(exists.error))
        if not exists.value:
            return Err(StepFailure(kind="precondition", message=f"Tag '{tag}' doesn't exist."))
        return Ok(replace(state, source_tag=tag))

    def _step_resolve_branch(self, state: RunState) -> StepResult:
        prefix = self.lifecycle.branch_prefix(self.gitflow)
        wanted = self._wanted_branch(prefix)

        local = self.vcs.find_local_branches(prefix)
        if isinstance(local, Err):
            return Err(_vcs_failure(local.error))
        candidates = [b for b in local.value if wanted is None or b == wanted]
        if len(candidates) > 1:
            return Err(self._ambiguous(candidates))
        if candidates:
            branch = candidates[0]
            return Ok(replace(state, branch=branch, push_refs=(branch,)))

        if not self.options.fetch_remote:
            return Err(self._no_branch())

        remote = self.vcs.find_remote_branches(self.gitflow.origin, prefix)
        if isinstance(remote, Err):
            return Err(_vcs_failure(remote.error))
        remote_prefix = f"{self.gitflow.origin}/"
        candidates = [
            r for r in remote.value if wanted is None or r == remote_prefix + wanted
        ]
        if len(candidates) > 1:
            return Err(self._ambiguous(candidates))
        if not candidates:
            return Err(self._no_branch())

        remote_ref = candidates[0]
        branch = remote_ref.removeprefix(remote_prefix)
        created = self.vcs.create_and_checkout(branch, remote_ref)
        if isinstance(created, Err):
            return Err(_vcs_failure(created.error))
        self.console.info(f"created local branch {branch} from {remote_ref}")
        return Ok(replace(state, branch=branch, push_refs=(branch,)))

    def _step_check_snapshots(self, state: RunState) -> StepResult:
        if state.branch is not None:
            checked_out = self.vcs.checkout(state.branch)
            if isinstance(checked_out, Err):
                return Err(_vcs_failure(checked_out.error))

        found = self.builder.has_snapshot_dependency()
        if isinstance(found, Err):
            return Err(_build_failure(found.error))
        if found.value:
            return Err(
                StepFailure(
                    kind="precondition",
                    message="There are SNAPSHOT dependencies in the project.",
                    hint="Release them first or pass --allow-snapshots.",
                )
            )
        return Ok(state)

    def _step_sync_remote(self, state: RunState) -> StepResult:
        names = [n for n in (state.branch, *self.lifecycle.companions(self.gitflow)) if n]
        for name in dict.fromkeys(names):
            if name != state.branch:
                ensured = self._ensure_local(name)
                if isinstance(ensured, Err):
                    return ensured
            compared = self.vcs.fetch_and_compare(name)
            if isinstance(compared, Err):
                return Err(_vcs_failure(compared.error))
        return Ok(state)

    def _step_checkout(self, state: RunState) -> StepResult:
        ref = state.source_tag or state.branch
        if ref is None:
            return Err(StepFailure(kind="precondition", message="Nothing to check out."))
        checked_out = self.vcs.checkout(ref)
        if isinstance(checked_out, Err):
            return Err(_vcs_failure(checked_out.error))
        return Ok(state)

    def _step_test(self, state: RunState) -> StepResult:
        return self._build(state, self.builder.clean_test())

    def _step_pre_goals(self, state: RunState) -> StepResult:
        return self._build(state, self.builder.run_goals(self.options.pre_goals or ""))

    def _step_post_goals(self, state: RunState) -> StepResult:
        return self._build(state, self.builder.run_goals(self.options.post_goals or ""))

    def _step_install(self, state: RunState) -> StepResult:
        return self._build(state, self.builder.clean_install())

    def _build(self, state: RunState, result: Result[None, BuildError]) -> StepResult:
        if isinstance(result, Err):
            return Err(_build_failure(result.error))
        return Ok(state)

    def _step_release_version(self, state: RunState) -> StepResult:
        current = self.builder.current_project_version()
        if isinstance(current, Err):
            return Err(_build_failure(current.error))
        current_version = current.value

        if self.lifecycle.version_rule == "current":
            version = current_version
            if self.options.use_snapshot and is_snapshot_version(version):
                version = strip_snapshot(version)
        else:
            chosen = self._choose_release_version(current_version)
            if isinstance(chosen, Err):
                return chosen
            version = chosen.value

        target = version
        if (
            self.lifecycle.version_rule == "support_start"
            and self.options.use_snapshot
            and not is_snapshot_version(target)
        ):
            target = version + SNAPSHOT_SUFFIX

        return Ok(
            replace(
                state,
                current_version=current_version,
                release_version=version,
                pending_version=target if target != current_version else None,
            )
        )

    def _step_create_branch(self, state: RunState) -> StepResult:
        branch = self.gitflow.support_prefix + (state.release_version or "")
        if not self.vcs.is_valid_branch_name(branch):
            return Err(StepFailure(kind="config", message=f"'{branch}' is not a valid branch name."))

        exists = self.vcs.branch_exists(branch)
        if isinstance(exists, Err):
            return Err(_vcs_failure(exists.error))
        if exists.value:
            return Err(
                StepFailure(
                    kind="precondition",
                    message=f"Support branch '{branch}' already exists.",
                    hint="Choose another version.",
                )
            )

        created = self.vcs.create_and_checkout(branch, state.source_tag or "HEAD")
        if isinstance(created, Err):
            return Err(_vcs_failure(created.error))
        return Ok(replace(state, branch=branch, push_refs=(branch,)))

    def _step_commit_release(self, state: RunState) -> StepResult:
        version = state.pending_version or ""
        committed = self._set_version_and_commit(version, self.lifecycle.release_message(self.messages))
        if isinstance(committed, Err):
            return committed
        return Ok(replace(state, current_version=version, pending_version=None))

    def _step_merge_production(self, state: RunState) -> StepResult:
        production = self.gitflow.production_branch
        switched = self._switch_to(production)
        if isinstance(switched, Err):
            return switched
        merged = self._merge_working_branch(state)
        if isinstance(merged, Err):
            return merged
        return Ok(replace(state, push_refs=(production,)))

    def _step_tag(self, state: RunState) -> StepResult:
        current = self.builder.current_project_version()
        if isinstance(current, Err):
            return Err(_build_failure(current.error))
        version = current.value
        if (self.options.tycho_build or self.options.use_snapshot) and is_snapshot_version(version):
            version = strip_snapshot(version)

        name = self.gitflow.version_tag_prefix + version
        exists = self.vcs.tag_exists(name)
        if isinstance(exists, Err):
            return Err(_vcs_failure(exists.error))
        if exists.value:
            return Err(StepFailure(kind="precondition", message=f"Tag '{name}' already exists."))

        selector = self.lifecycle.tag_message or self.lifecycle.release_message
        tagged = self.vcs.tag(name, selector(self.messages), self.options.gpg_sign_tag, {"version": version})
        if isinstance(tagged, Err):
            return Err(_vcs_failure(tagged.error))
        return Ok(replace(state, tag=name))

    def _step_next_development(self, state: RunState) -> StepResult:
        version = self.options.development_version
        if version is None:
            base = state.current_version or state.release_version or ""
            parsed = parse_version(base)
            if isinstance(parsed, Err):
                return Err(
                    StepFailure(
                        kind="precondition",
                        message=f"Cannot compute the next development version: {parsed.error.message}",
                    )
                )
            info: VersionInfo = parsed.value
            if self.options.digits_only_dev_version:
                info = info.digits_version_info()
            default = info.next_snapshot_version(self.options.version_digit_to_increment)
            chosen = self.values.development_version(default)
            if isinstance(chosen, Err):
                return Err(_input_failure(chosen.error))
            version = chosen.value

        selector = self.lifecycle.development_message or self.lifecycle.release_message
        committed = self._set_version_and_commit(version, selector(self.messages))
        if isinstance(committed, Err):
            return committed
        return Ok(replace(state, current_version=version, development_version=version))

    def _step_merge_development(self, state: RunState) -> StepResult:
        development = self.gitflow.development_branch
        switched = self._switch_to(development)
        if isinstance(switched, Err):
            return switched

        before = self.builder.current_project_version()
        if isinstance(before, Err):
            return Err(_build_failure(before.error))
        merged = self._merge_working_branch(state)
        if isinstance(merged, Err):
            return merged
        after = self.builder.current_project_version()
        if isinstance(after, Err):
            return Err(_build_failure(after.error))

        # The merge brings the hotfix version along; development keeps its own.
        if after.value != before.value:
            selector = self.lifecycle.development_message or self.lifecycle.release_message
            committed = self._set_version_and_commit(before.value, selector(self.messages))
            if isinstance(committed, Err):
                return committed

        return Ok(
            replace(
                state,
                development_version=before.value,
                push_refs=(*state.push_refs, development),
            )
        )

    def _step_push(self, state: RunState) -> StepResult:
        pushed: list[str] = []
        for ref in state.push_refs:
            result = self.vcs.push(ref, include_tags=state.tag is not None)
            if isinstance(result, Err):
                return Err(_vcs_failure(result.error))
            pushed.append(ref)
        return Ok(replace(state, pushed=tuple(pushed)))

    def _step_cleanup(self, state: RunState) -> StepResult:
        switched = self._switch_to(self.gitflow.production_branch)
        if isinstance(switched, Err):
            return switched
        if self.options.keep_branch or state.branch is None:
            return Ok(state)
        deleted = self.vcs.delete_branch(state.branch)
        if isinstance(deleted, Err):
            return Err(_vcs_failure(deleted.error))
        return Ok(state)

    # -- helpers -----------------------------------------------------------

    def _wanted_branch(self, prefix: str) -> str | None:
        if self.options.branch is None:
            return None
        name = self.options.branch.strip()
        return name if name.startswith(prefix) else prefix + name

    def _ambiguous(self, candidates: list[str]) -> StepFailure:
        return StepFailure(
            kind="precondition",
            message=f"More than one {self.kind} branch exists: {', '.join(candidates)}",
            hint="Pass --branch to pick one.",
        )

    def _no_branch(self) -> StepFailure:
        return StepFailure(kind="precondition", message=f"There is no {self.kind} branch.")

    def _choose_release_version(self, current: str) -> Result[str, StepFailure]:
        version = self.options.release_version
        if version is None:
            default = self._default_release_version(current)
            if isinstance(default, Err):
                return default
            chosen = self.values.release_version(default.value)
            if isinstance(chosen, Err):
                return Err(_input_failure(chosen.error))
            version = chosen.value

        # A release is never a snapshot, whoever picked the version.
        if self.lifecycle.version_rule == "release":
            version = strip_snapshot(version)
        return Ok(version)

    def _default_release_version(self, current: str) -> Result[str, StepFailure]:
        if self.options.tycho_build:
            return Ok(strip_snapshot(current) if self.lifecycle.version_rule == "release" else current)

        parsed = parse_version(current)
        if isinstance(parsed, Err):
            return Err(
                StepFailure(
                    kind="precondition",
                    message=f"Cannot compute the default version: {parsed.error.message}",
                    hint="Pass --release-version.",
                )
            )
        info = parsed.value
        if self.lifecycle.version_rule == "release":
            return Ok(info.release_version_string())

        # Support branches count the digit as a padding width, not an index.
        digit = self.options.version_digit_to_increment
        raw = info.digits_version_info().padded_version(3 if digit is None else digit)
        padded = parse_version(raw)
        if isinstance(padded, Err):
            return Err(StepFailure(kind="precondition", message=padded.error.message))
        return Ok(padded.value.next_version().release_version_string())

    def _set_version_and_commit(self, version: str, template: str) -> Result[None, StepFailure]:
        updated = self.builder.set_version(version)
        if isinstance(updated, Err):
            return Err(_build_failure(updated.error))
        committed = self.vcs.commit(template, {"version": version})
        if isinstance(committed, Err):
            return Err(_vcs_failure(committed.error))
        return Ok(None)

    def _merge_working_branch(self, state: RunState) -> Result[None, StepFailure]:
        selector = self.lifecycle.merge_message or self.lifecycle.release_message
        merged = self.vcs.merge(
            state.branch or "",
            selector(self.messages),
            {"version": state.release_version or ""},
            no_ff=True,
        )
        if isinstance(merged, Err):
            return Err(_vcs_failure(merged.error))
        return Ok(None)

    def _switch_to(self, name: str) -> Result[None, StepFailure]:
        """Check out ``name``, creating it from the remote when only that exists."""
        ensured = self._ensure_local(name)
        if isinstance(ensured, Err):
            return ensured
        if ensured.value:
            return Ok(None)
        checked_out = self.vcs.checkout(name)
        if isinstance(checked_out, Err):
            return Err(_vcs_failure(checked_out.error))
        return Ok(None)

    def _ensure_local(self, name: str) -> Result[bool, StepFailure]:
        """Make sure branch ``name`` exists locally; True if it was just
        created (and is therefore checked out)."""
        exists = self.vcs.branch_exists(name)
        if isinstance(exists, Err):
            return Err(_vcs_failure(exists.error))
        if exists.value:
            return Ok(False)

        if not self.options.fetch_remote:
            return Err(StepFailure(kind="precondition", message=f"There is no local branch '{name}'."))

        remote = self.vcs.find_remote_branches(self.gitflow.origin, name)
        if isinstance(remote, Err):
            return Err(_vcs_failure(remote.error))
        remote_ref = f"{self.gitflow.origin}/{name}"
        if remote_ref not in remote.value:
            return Err(
                StepFailure(kind="precondition", message=f"There is no local or remote branch '{name}'.")
            )
        created = self.vcs.create_and_checkout(name, remote_ref)
        if isinstance(created, Err):
            return Err(_vcs_failure(created.error))
        return Ok(True)
