"""Console output abstraction.

Lifecycles report progress (which step runs, which version was chosen)
through ``ConsoleProtocol`` so the orchestrator never depends on a
terminal library. ``RichConsole`` is used by the CLI, ``MockConsole``
captures output in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Styled text output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def step(self, name: str) -> None:
        """Announce a lifecycle step before it runs."""
        ...


_RICH_STYLES = {
    Style.DEFAULT: "",
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
    Style.HEADER: "blue bold",
}


class RichConsole:
    """Terminal output for the CLI; labels match what ``MockConsole`` records."""

    def __init__(self) -> None:
        from rich.console import Console

        self._console = Console()

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._console.print(message, style=_RICH_STYLES[style] or None, highlight=False)

    def _labelled(self, label: str, style: Style, message: str) -> None:
        color = _RICH_STYLES[style]
        self._console.print(f"[{color}]{label}[/{color}] {message}", highlight=False)

    def success(self, message: str) -> None:
        self._labelled("OK", Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._labelled("error:", Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._labelled("warning:", Style.WARNING, message)

    def info(self, message: str) -> None:
        self._labelled("info:", Style.INFO, message)

    def header(self, message: str) -> None:
        self._console.print()
        self.print(message, Style.HEADER)

    def step(self, name: str) -> None:
        self.print(f"step: {name}", Style.DIM)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"info: {message}", Style.INFO))

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    def step(self, name: str) -> None:
        self.outputs.append(OutputRecord(f"step: {name}", Style.DIM))

    # Test helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    @property
    def steps(self) -> list[str]:
        """Names of announced steps, in order."""
        return [o.message.removeprefix("step: ") for o in self.outputs if o.message.startswith("step: ")]

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]
