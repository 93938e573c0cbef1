"""Where user-chosen values come from.

The orchestrator asks a ``ValueSource`` for versions and the support source
tag once it has computed a default. In batch mode the default is taken as
is; in interactive mode the user is prompted until a usable value is given.
Explicit overrides in ``FlowOptions`` are applied by the orchestrator before
any source is consulted.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from relflow.core.result import Err, Ok, Result
from relflow.core.version import is_valid_version
from relflow.output.console import ConsoleProtocol

__all__ = ["BatchValues", "InputError", "Prompter", "PromptedValues", "ValueSource"]


@dataclass(frozen=True, slots=True)
class InputError:
    message: str


class Prompter(Protocol):
    def ask(self, question: str, default: str) -> str:
        """Ask a free-form question; an empty answer means ``default``."""
        ...

    def choose(self, question: str, choices: Sequence[str]) -> str:
        """Pick one of ``choices`` (non-empty)."""
        ...


class ValueSource(Protocol):
    def release_version(self, default: str) -> Result[str, InputError]: ...

    def development_version(self, default: str) -> Result[str, InputError]: ...

    def source_tag(self, tags: Sequence[str]) -> Result[str, InputError]: ...


class BatchValues:
    """Non-interactive: computed defaults are accepted unchanged."""

    def release_version(self, default: str) -> Result[str, InputError]:
        return Ok(default)

    def development_version(self, default: str) -> Result[str, InputError]:
        return Ok(default)

    def source_tag(self, tags: Sequence[str]) -> Result[str, InputError]:
        return Err(InputError("Tag is blank. Pass --tag to choose the tag to start from."))


class PromptedValues:
    """Interactive: ask the user, re-asking until the answer is usable.

    A version must be valid and must also make a valid branch name, since
    support branches are named after it.
    """

    def __init__(
        self,
        prompter: Prompter,
        console: ConsoleProtocol,
        is_valid_branch_name: Callable[[str], bool],
    ) -> None:
        self.prompter = prompter
        self.console = console
        self.is_valid_branch_name = is_valid_branch_name

    def release_version(self, default: str) -> Result[str, InputError]:
        return Ok(self._ask_version("What is the release version?", default))

    def development_version(self, default: str) -> Result[str, InputError]:
        return Ok(self._ask_version("What is the next development version?", default))

    def source_tag(self, tags: Sequence[str]) -> Result[str, InputError]:
        if not tags:
            return Err(InputError("There are no tags."))
        return Ok(self.prompter.choose("Choose tag to start support branch", list(tags)))

    def _ask_version(self, question: str, default: str) -> str:
        while True:
            answer = self.prompter.ask(question, default).strip() or default
            if is_valid_version(answer) and self.is_valid_branch_name(answer):
                return answer
            self.console.warning(f"'{answer}' is not a valid version")
