"""Lifecycle descriptors.

A lifecycle is data: the ordered steps the orchestrator runs, which kind of
branch it works on, how its release version is chosen and which message
templates its commits and tags use. The orchestrator owns the step
implementations; adding a lifecycle means composing existing steps.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from operator import attrgetter
from typing import Literal

from relflow.core.config import CommitMessages, GitFlowConfig

__all__ = [
    "HOTFIX_FINISH",
    "LIFECYCLES",
    "RELEASE_UPDATE",
    "SUPPORT_FINISH",
    "SUPPORT_START",
    "Lifecycle",
    "StepName",
]

StepName = Literal[
    "check_uncommitted",
    "resolve_tag",
    "resolve_branch",
    "check_snapshots",
    "sync_remote",
    "checkout",
    "test",
    "pre_goals",
    "release_version",
    "create_branch",
    "commit_release",
    "merge_production",
    "tag",
    "post_goals",
    "next_development",
    "install",
    "merge_development",
    "push",
    "cleanup",
]

BranchKind = Literal["release", "support", "hotfix"]

# support_start: next version after the source tag, padded to three digits
# release: current project version without its qualifier
# current: current project version, optionally stripped of -SNAPSHOT
VersionRule = Literal["support_start", "release", "current"]

MessageSelector = Callable[[CommitMessages], str]


def _no_companions(_gitflow: GitFlowConfig) -> tuple[str, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class Lifecycle:
    name: str
    branch_kind: BranchKind
    version_rule: VersionRule
    steps: tuple[StepName, ...]
    release_message: MessageSelector
    tag_message: MessageSelector | None = None
    development_message: MessageSelector | None = None
    merge_message: MessageSelector | None = None
    companions: Callable[[GitFlowConfig], tuple[str, ...]] = _no_companions

    def branch_prefix(self, gitflow: GitFlowConfig) -> str:
        match self.branch_kind:
            case "release":
                return gitflow.release_prefix
            case "support":
                return gitflow.support_prefix
            case "hotfix":
                return gitflow.hotfix_prefix


def _production_if_separate(gitflow: GitFlowConfig) -> tuple[str, ...]:
    if gitflow.same_prod_dev_name:
        return ()
    return (gitflow.production_branch,)


def _production_and_development(gitflow: GitFlowConfig) -> tuple[str, ...]:
    return tuple(dict.fromkeys((gitflow.production_branch, gitflow.development_branch)))


SUPPORT_START = Lifecycle(
    name="support-start",
    branch_kind="support",
    version_rule="support_start",
    steps=(
        "check_uncommitted",
        "resolve_tag",
        "checkout",
        "release_version",
        "create_branch",
        "commit_release",
        "install",
        "push",
    ),
    release_message=attrgetter("support_start"),
)

SUPPORT_FINISH = Lifecycle(
    name="support-finish",
    branch_kind="support",
    version_rule="current",
    steps=(
        "check_uncommitted",
        "resolve_branch",
        "checkout",
        "check_snapshots",
        "sync_remote",
        "test",
        "pre_goals",
        "release_version",
        "commit_release",
        "tag",
        "post_goals",
        "install",
        "push",
        "cleanup",
    ),
    release_message=attrgetter("support_start"),
    tag_message=attrgetter("tag_support"),
)

RELEASE_UPDATE = Lifecycle(
    name="release-update",
    branch_kind="release",
    version_rule="release",
    steps=(
        "check_uncommitted",
        "resolve_branch",
        "check_snapshots",
        "sync_remote",
        "checkout",
        "test",
        "pre_goals",
        "release_version",
        "commit_release",
        "tag",
        "post_goals",
        "next_development",
        "install",
        "push",
    ),
    release_message=attrgetter("release_finish"),
    tag_message=attrgetter("tag_release"),
    development_message=attrgetter("release_finish"),
    companions=_production_if_separate,
)

HOTFIX_FINISH = Lifecycle(
    name="hotfix-finish",
    branch_kind="hotfix",
    version_rule="release",
    steps=(
        "check_uncommitted",
        "resolve_branch",
        "check_snapshots",
        "sync_remote",
        "checkout",
        "test",
        "pre_goals",
        "release_version",
        "commit_release",
        "merge_production",
        "tag",
        "post_goals",
        "install",
        "merge_development",
        "push",
        "cleanup",
    ),
    release_message=attrgetter("hotfix_release"),
    tag_message=attrgetter("tag_hotfix"),
    development_message=attrgetter("hotfix_finish"),
    merge_message=attrgetter("merge_hotfix"),
    companions=_production_and_development,
)

LIFECYCLES: dict[str, Lifecycle] = {
    lc.name: lc for lc in (SUPPORT_START, SUPPORT_FINISH, RELEASE_UPDATE, HOTFIX_FINISH)
}
