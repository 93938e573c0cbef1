"""Tests for flow/lifecycles.py."""

from __future__ import annotations

from relflow.core.config import CommitMessages, GitFlowConfig
from relflow.flow.lifecycles import HOTFIX_FINISH, LIFECYCLES, RELEASE_UPDATE, SUPPORT_FINISH, SUPPORT_START
from relflow.flow.orchestrator import _LifecycleRun


class TestDescriptors:
    """Lifecycle descriptors are consistent with the runner."""

    def test_registry(self) -> None:
        assert set(LIFECYCLES) == {"support-start", "support-finish", "release-update", "hotfix-finish"}

    def test_every_step_has_an_implementation(self) -> None:
        for lifecycle in LIFECYCLES.values():
            for step in lifecycle.steps:
                assert hasattr(_LifecycleRun, f"_step_{step}"), (lifecycle.name, step)

    def test_every_lifecycle_starts_with_the_working_copy_check(self) -> None:
        for lifecycle in LIFECYCLES.values():
            assert lifecycle.steps[0] == "check_uncommitted"

    def test_branch_prefixes(self) -> None:
        gitflow = GitFlowConfig(release_prefix="rel-", support_prefix="maint/", hotfix_prefix="fix/")
        assert RELEASE_UPDATE.branch_prefix(gitflow) == "rel-"
        assert SUPPORT_FINISH.branch_prefix(gitflow) == "maint/"
        assert HOTFIX_FINISH.branch_prefix(gitflow) == "fix/"

    def test_message_selection(self) -> None:
        messages = CommitMessages()
        assert SUPPORT_START.release_message(messages) == messages.support_start
        assert RELEASE_UPDATE.tag_message is not None
        assert RELEASE_UPDATE.tag_message(messages) == messages.tag_release
        assert HOTFIX_FINISH.merge_message is not None
        assert HOTFIX_FINISH.merge_message(messages) == "Merge hotfix @{version}"

    def test_companion_branches(self) -> None:
        assert RELEASE_UPDATE.companions(GitFlowConfig()) == ("master",)
        assert RELEASE_UPDATE.companions(GitFlowConfig(development_branch="master")) == ()
        assert HOTFIX_FINISH.companions(GitFlowConfig()) == ("master", "develop")
        assert SUPPORT_FINISH.companions(GitFlowConfig()) == ()
