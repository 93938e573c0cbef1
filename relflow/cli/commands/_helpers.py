"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from relflow.core.errors import ErrorCode
from relflow.core.result import Err, Result
from relflow.flow.errors import FlowError, FlowErrorKind
from relflow.output.console import ConsoleProtocol, Style

_EXIT_CODES: dict[FlowErrorKind, ErrorCode] = {
    "config": ErrorCode.USER_ERROR,
    "precondition": ErrorCode.PRECONDITION_FAILED,
    "divergence": ErrorCode.DIVERGED,
    "build": ErrorCode.BUILD_ERROR,
    "external": ErrorCode.EXTERNAL_ERROR,
}


def flow_error_exit_code(error: FlowError) -> int:
    return int(_EXIT_CODES[error.kind])


def print_flow_error(error: FlowError, console: ConsoleProtocol) -> None:
    console.error(f"{error.lifecycle} failed at step '{error.step}': {error.message}")
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def exit_on_error[T, E](
    result: Result[T, E],
    console: ConsoleProtocol,
    error_code: ErrorCode = ErrorCode.USER_ERROR,
) -> None:
    """Exit with error if result is Err, otherwise return.

    Expects error objects to have a 'message' and optional 'hint' attribute.
    """
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        hint: str | None = getattr(error, "hint", None)
        console.error(message)
        if hint:
            console.print(f"hint: {hint}", Style.DIM)
        raise typer.Exit(code=int(error_code))


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)
