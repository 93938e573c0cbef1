"""Release lifecycles and the orchestrator that runs them."""

from relflow.flow.errors import FlowError, FlowErrorKind, StepFailure
from relflow.flow.inputs import BatchValues, InputError, PromptedValues, Prompter, ValueSource
from relflow.flow.lifecycles import (
    HOTFIX_FINISH,
    LIFECYCLES,
    RELEASE_UPDATE,
    SUPPORT_FINISH,
    SUPPORT_START,
    Lifecycle,
    StepName,
)
from relflow.flow.options import FlowOptions, validate_options
from relflow.flow.orchestrator import FlowOutcome, RunState, WorkflowOrchestrator

__all__ = [
    "HOTFIX_FINISH",
    "LIFECYCLES",
    "RELEASE_UPDATE",
    "SUPPORT_FINISH",
    "SUPPORT_START",
    "BatchValues",
    "FlowError",
    "FlowErrorKind",
    "FlowOptions",
    "FlowOutcome",
    "InputError",
    "Lifecycle",
    "PromptedValues",
    "Prompter",
    "RunState",
    "StepFailure",
    "StepName",
    "ValueSource",
    "WorkflowOrchestrator",
    "validate_options",
]
