"""Core domain types and logic."""

from .config import (
    CommitMessages,
    ConfigError,
    FlowSettings,
    GitFlowConfig,
    MavenConfig,
    OptionDefaults,
    load_config,
    load_settings,
)
from .errors import ErrorCode
from .messages import render_message
from .result import Err, Ok, Result, is_err, is_ok
from .version import InvalidVersion, VersionInfo, is_valid_version, parse_version

__all__ = [
    # config
    "CommitMessages",
    "ConfigError",
    "FlowSettings",
    "GitFlowConfig",
    "MavenConfig",
    "OptionDefaults",
    "load_config",
    "load_settings",
    # errors
    "ErrorCode",
    # messages
    "render_message",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # version
    "InvalidVersion",
    "VersionInfo",
    "is_valid_version",
    "parse_version",
]
