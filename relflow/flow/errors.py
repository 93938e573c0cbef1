"""Error types for lifecycle runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

__all__ = ["FlowError", "FlowErrorKind", "StepFailure"]

FlowErrorKind = Literal["config", "precondition", "divergence", "build", "external"]


@dataclass(frozen=True, slots=True)
class StepFailure:
    """Why a single step failed, before lifecycle context is attached."""

    kind: FlowErrorKind
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class FlowError:
    """A lifecycle run stopped at ``step``.

    Steps completed before the failure are not undone; ``step`` tells the
    user where to pick up by hand.
    """

    kind: FlowErrorKind
    lifecycle: str
    step: str
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        text = f"{self.lifecycle}: {self.step}: {self.message}"
        if self.hint:
            return f"{text} (hint: {self.hint})"
        return text
