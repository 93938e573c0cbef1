"""Lifecycle commands: support-start, support-finish, release-update, hotfix-finish.

Flags left unset fall back to ``[options]`` in relflow.toml.
"""

from __future__ import annotations

import sys

import typer

from relflow.cli.commands._helpers import exit_with_code, flow_error_exit_code, print_flow_error
from relflow.cli.context import CLIContext, build_context
from relflow.cli.prompter import TyperPrompter
from relflow.core.result import Err
from relflow.flow.inputs import BatchValues, PromptedValues, ValueSource
from relflow.flow.lifecycles import HOTFIX_FINISH, RELEASE_UPDATE, SUPPORT_FINISH, SUPPORT_START, Lifecycle
from relflow.flow.options import FlowOptions
from relflow.flow.orchestrator import FlowOutcome, WorkflowOrchestrator

_BATCH = typer.Option(False, "--batch", "-B", help="Never prompt; accept computed versions.")
_FETCH = typer.Option(None, "--fetch/--no-fetch", help="Fetch and compare with the remote.", show_default=False)
_PUSH = typer.Option(None, "--push/--no-push", help="Push branches and tags.", show_default=False)
_INSTALL = typer.Option(None, "--install/--no-install", help="Run 'mvn clean install'.", show_default=False)
_USE_SNAPSHOT = typer.Option(
    None, "--use-snapshot/--no-use-snapshot", help="Keep -SNAPSHOT on support versions.", show_default=False
)
_SKIP_TAG = typer.Option(None, "--skip-tag", help="Do not create a tag.", show_default=False)
_KEEP_BRANCH = typer.Option(None, "--keep-branch", help="Keep the branch after finishing.", show_default=False)
_SKIP_TEST = typer.Option(None, "--skip-test", help="Skip 'mvn clean test'.", show_default=False)
_ALLOW_SNAPSHOTS = typer.Option(
    None, "--allow-snapshots", help="Allow SNAPSHOT dependencies.", show_default=False
)
_SIGN = typer.Option(None, "--sign", help="GPG-sign the tag.", show_default=False)
_PRE_GOALS = typer.Option(None, "--pre-goals", help="Maven goals to run before the release commit.")
_POST_GOALS = typer.Option(None, "--post-goals", help="Maven goals to run after tagging.")
_DIGIT = typer.Option(
    None, "--digit", help="Zero-based version component to increment.", show_default=False
)
_PAD_DIGITS = typer.Option(
    None,
    "--digit",
    help="Pad the tag version to this many components before incrementing (default 3).",
    show_default=False,
)
_RELEASE_VERSION = typer.Option(None, "--release-version", help="Release version (skips the computed default).")
_DEV_VERSION = typer.Option(
    None, "--development-version", help="Next development version (skips the computed default)."
)
_DIGITS_ONLY = typer.Option(
    None, "--digits-only", help="Drop qualifiers from the next development version.", show_default=False
)
_BRANCH = typer.Option(None, "--branch", help="Branch to work on when several exist.")
_TYCHO = typer.Option(None, "--tycho/--no-tycho", help="Use tycho-versions for Eclipse builds.", show_default=False)


def support_start(
    tag: str | None = typer.Option(None, "--tag", help="Tag to start the support branch from."),
    release_version: str | None = _RELEASE_VERSION,
    digit: int | None = _PAD_DIGITS,
    use_snapshot: bool | None = _USE_SNAPSHOT,
    install: bool | None = _INSTALL,
    push: bool | None = _PUSH,
    tycho: bool | None = _TYCHO,
    batch: bool = _BATCH,
) -> None:
    """Start a support branch from a release tag."""
    _run(
        SUPPORT_START,
        batch=batch,
        tycho=tycho,
        source_tag=tag,
        release_version=release_version,
        version_digit_to_increment=digit,
        use_snapshot=use_snapshot,
        install_project=install,
        push_remote=push,
    )


def support_finish(
    branch: str | None = _BRANCH,
    skip_tag: bool | None = _SKIP_TAG,
    keep_branch: bool | None = _KEEP_BRANCH,
    skip_test: bool | None = _SKIP_TEST,
    allow_snapshots: bool | None = _ALLOW_SNAPSHOTS,
    sign: bool | None = _SIGN,
    pre_goals: str | None = _PRE_GOALS,
    post_goals: str | None = _POST_GOALS,
    use_snapshot: bool | None = _USE_SNAPSHOT,
    install: bool | None = _INSTALL,
    fetch: bool | None = _FETCH,
    push: bool | None = _PUSH,
    tycho: bool | None = _TYCHO,
    batch: bool = _BATCH,
) -> None:
    """Tag the support branch and close it."""
    _run(
        SUPPORT_FINISH,
        batch=batch,
        tycho=tycho,
        branch=branch,
        skip_tag=skip_tag,
        keep_branch=keep_branch,
        skip_test_project=skip_test,
        allow_snapshots=allow_snapshots,
        gpg_sign_tag=sign,
        pre_goals=pre_goals,
        post_goals=post_goals,
        use_snapshot=use_snapshot,
        install_project=install,
        fetch_remote=fetch,
        push_remote=push,
    )


def release_update(
    branch: str | None = _BRANCH,
    release_version: str | None = _RELEASE_VERSION,
    development_version: str | None = _DEV_VERSION,
    digit: int | None = _DIGIT,
    digits_only: bool | None = _DIGITS_ONLY,
    skip_tag: bool | None = _SKIP_TAG,
    skip_test: bool | None = _SKIP_TEST,
    allow_snapshots: bool | None = _ALLOW_SNAPSHOTS,
    sign: bool | None = _SIGN,
    pre_goals: str | None = _PRE_GOALS,
    post_goals: str | None = _POST_GOALS,
    install: bool | None = _INSTALL,
    fetch: bool | None = _FETCH,
    push: bool | None = _PUSH,
    tycho: bool | None = _TYCHO,
    batch: bool = _BATCH,
) -> None:
    """Release the release branch in place and move it to the next development version."""
    _run(
        RELEASE_UPDATE,
        batch=batch,
        tycho=tycho,
        branch=branch,
        release_version=release_version,
        development_version=development_version,
        version_digit_to_increment=digit,
        digits_only_dev_version=digits_only,
        skip_tag=skip_tag,
        skip_test_project=skip_test,
        allow_snapshots=allow_snapshots,
        gpg_sign_tag=sign,
        pre_goals=pre_goals,
        post_goals=post_goals,
        install_project=install,
        fetch_remote=fetch,
        push_remote=push,
    )


def hotfix_finish(
    branch: str | None = _BRANCH,
    release_version: str | None = _RELEASE_VERSION,
    skip_tag: bool | None = _SKIP_TAG,
    keep_branch: bool | None = _KEEP_BRANCH,
    skip_test: bool | None = _SKIP_TEST,
    allow_snapshots: bool | None = _ALLOW_SNAPSHOTS,
    sign: bool | None = _SIGN,
    pre_goals: str | None = _PRE_GOALS,
    post_goals: str | None = _POST_GOALS,
    install: bool | None = _INSTALL,
    fetch: bool | None = _FETCH,
    push: bool | None = _PUSH,
    tycho: bool | None = _TYCHO,
    batch: bool = _BATCH,
) -> None:
    """Merge the hotfix branch into production and development, then close it."""
    _run(
        HOTFIX_FINISH,
        batch=batch,
        tycho=tycho,
        branch=branch,
        release_version=release_version,
        skip_tag=skip_tag,
        keep_branch=keep_branch,
        skip_test_project=skip_test,
        allow_snapshots=allow_snapshots,
        gpg_sign_tag=sign,
        pre_goals=pre_goals,
        post_goals=post_goals,
        install_project=install,
        fetch_remote=fetch,
        push_remote=push,
    )


def _run(lifecycle: Lifecycle, *, batch: bool, tycho: bool | None, **overrides: object) -> None:
    ctx = build_context(tycho_build=tycho)
    options = FlowOptions.from_defaults(
        ctx.settings.options, tycho_build=ctx.settings.maven.tycho_build, **overrides
    )

    orchestrator = WorkflowOrchestrator(
        vcs=ctx.vcs,
        builder=ctx.builder,
        settings=ctx.settings,
        console=ctx.console,
        values=_value_source(ctx, interactive=not batch and _stdin_is_terminal()),
    )

    ctx.console.header(f"{lifecycle.name} ({ctx.root})")
    result = orchestrator.run(lifecycle, options)
    if isinstance(result, Err):
        print_flow_error(result.error, ctx.console)
        exit_with_code(flow_error_exit_code(result.error))
    _print_outcome(result.value, ctx)


def _stdin_is_terminal() -> bool:
    return sys.stdin.isatty()


def _value_source(ctx: CLIContext, *, interactive: bool) -> ValueSource:
    if not interactive:
        return BatchValues()
    return PromptedValues(TyperPrompter(), ctx.console, ctx.vcs.is_valid_branch_name)


def _print_outcome(outcome: FlowOutcome, ctx: CLIContext) -> None:
    if outcome.release_version:
        ctx.console.print(f"release version: {outcome.release_version}")
    if outcome.tag:
        ctx.console.print(f"tag: {outcome.tag}")
    if outcome.development_version:
        ctx.console.print(f"development version: {outcome.development_version}")
    if outcome.pushed:
        ctx.console.print(f"pushed: {', '.join(outcome.pushed)}")
    ctx.console.success(f"{outcome.lifecycle} done on {outcome.branch}")
