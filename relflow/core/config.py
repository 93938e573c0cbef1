"""Typed configuration loading and access.

Settings come from an optional ``relflow.toml`` in the project root. Every
value has a default, so a project without the file behaves like a stock
git-flow setup (``master``/``develop``, ``release/``, ``support/``,
``hotfix/``, remote ``origin``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_int,
    get_raw_str,
    get_str,
    get_str_list,
    get_table,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "CommitMessages",
    "ConfigError",
    "FlowSettings",
    "GitFlowConfig",
    "MavenConfig",
    "OptionDefaults",
    "load_config",
    "load_settings",
]

CONFIG_FILE_NAME = "relflow.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GitFlowConfig:
    """Branch names and prefixes."""

    production_branch: str = "master"
    development_branch: str = "develop"
    release_prefix: str = "release/"
    support_prefix: str = "support/"
    hotfix_prefix: str = "hotfix/"
    version_tag_prefix: str = ""
    origin: str = "origin"

    @property
    def same_prod_dev_name(self) -> bool:
        return self.production_branch == self.development_branch


@dataclass(frozen=True, slots=True)
class CommitMessages:
    """Commit, merge and tag message templates (``@{version}`` placeholders)."""

    support_start: str = "Update versions for support branch"
    release_finish: str = "Update for next development version"
    hotfix_release: str = "Update versions for hotfix"
    hotfix_finish: str = "Update for next development version"
    tag_release: str = "Tag release"
    tag_support: str = "Tag support"
    tag_hotfix: str = "Tag hotfix"
    merge_hotfix: str = "Merge hotfix @{version}"


@dataclass(frozen=True, slots=True)
class OptionDefaults:
    """Project-wide defaults for per-run options; CLI flags override them."""

    fetch_remote: bool = True
    push_remote: bool = True
    skip_tag: bool = False
    keep_branch: bool = False
    skip_test_project: bool = False
    allow_snapshots: bool = False
    gpg_sign_tag: bool = False
    install_project: bool = False
    digits_only_dev_version: bool = False
    use_snapshot: bool = False
    version_digit_to_increment: int | None = None
    pre_goals: str | None = None
    post_goals: str | None = None


@dataclass(frozen=True, slots=True)
class MavenConfig:
    """How to invoke Maven."""

    executable: str = "mvn"
    args: tuple[str, ...] = ("-B",)
    tycho_build: bool = False


@dataclass(frozen=True, slots=True)
class FlowSettings:
    """Main configuration container."""

    gitflow: GitFlowConfig = field(default_factory=GitFlowConfig)
    messages: CommitMessages = field(default_factory=CommitMessages)
    options: OptionDefaults = field(default_factory=OptionDefaults)
    maven: MavenConfig = field(default_factory=MavenConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> FlowSettings:
        """Create settings from a mapping (parsed TOML)."""
        gitflow: StrDict = get_table(data, "gitflow") or {}
        messages: StrDict = get_table(data, "messages") or {}
        options: StrDict = get_table(data, "options") or {}
        maven: StrDict = get_table(data, "maven") or {}

        g = GitFlowConfig()
        m = CommitMessages()
        o = OptionDefaults()
        mv = MavenConfig()

        return cls(
            gitflow=GitFlowConfig(
                production_branch=get_str(gitflow, "production_branch") or g.production_branch,
                development_branch=get_str(gitflow, "development_branch") or g.development_branch,
                release_prefix=get_str(gitflow, "release_prefix") or g.release_prefix,
                support_prefix=get_str(gitflow, "support_prefix") or g.support_prefix,
                hotfix_prefix=get_str(gitflow, "hotfix_prefix") or g.hotfix_prefix,
                # An empty tag prefix is meaningful, so read it verbatim.
                version_tag_prefix=_first_str(
                    get_raw_str(gitflow, "version_tag_prefix"), g.version_tag_prefix
                ),
                origin=get_str(gitflow, "origin") or g.origin,
            ),
            messages=CommitMessages(
                support_start=get_str(messages, "support_start") or m.support_start,
                release_finish=get_str(messages, "release_finish") or m.release_finish,
                hotfix_release=get_str(messages, "hotfix_release") or m.hotfix_release,
                hotfix_finish=get_str(messages, "hotfix_finish") or m.hotfix_finish,
                tag_release=get_str(messages, "tag_release") or m.tag_release,
                tag_support=get_str(messages, "tag_support") or m.tag_support,
                tag_hotfix=get_str(messages, "tag_hotfix") or m.tag_hotfix,
                merge_hotfix=get_str(messages, "merge_hotfix") or m.merge_hotfix,
            ),
            options=OptionDefaults(
                fetch_remote=_first_bool(get_bool(options, "fetch_remote"), o.fetch_remote),
                push_remote=_first_bool(get_bool(options, "push_remote"), o.push_remote),
                skip_tag=_first_bool(get_bool(options, "skip_tag"), o.skip_tag),
                keep_branch=_first_bool(get_bool(options, "keep_branch"), o.keep_branch),
                skip_test_project=_first_bool(
                    get_bool(options, "skip_test_project"), o.skip_test_project
                ),
                allow_snapshots=_first_bool(get_bool(options, "allow_snapshots"), o.allow_snapshots),
                gpg_sign_tag=_first_bool(get_bool(options, "gpg_sign_tag"), o.gpg_sign_tag),
                install_project=_first_bool(get_bool(options, "install_project"), o.install_project),
                digits_only_dev_version=_first_bool(
                    get_bool(options, "digits_only_dev_version"), o.digits_only_dev_version
                ),
                use_snapshot=_first_bool(get_bool(options, "use_snapshot"), o.use_snapshot),
                version_digit_to_increment=get_int(options, "version_digit_to_increment"),
                pre_goals=get_str(options, "pre_goals"),
                post_goals=get_str(options, "post_goals"),
            ),
            maven=MavenConfig(
                executable=get_str(maven, "executable") or mv.executable,
                args=_first_list(get_str_list(maven, "args"), mv.args),
                tycho_build=_first_bool(get_bool(maven, "tycho_build"), mv.tycho_build),
            ),
        )


def _first_bool(value: bool | None, default: bool) -> bool:
    return default if value is None else value


def _first_str(value: str | None, default: str) -> str:
    return default if value is None else value


def _first_list(value: tuple[str, ...] | None, default: tuple[str, ...]) -> tuple[str, ...]:
    return default if value is None else value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[FlowSettings, ConfigError]:
    """Load and parse settings from a TOML file.

    Args:
        path: Path to relflow.toml

    Returns:
        Ok(FlowSettings) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(FlowSettings.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_settings(project_root: Path) -> Result[FlowSettings, ConfigError]:
    """Load ``relflow.toml`` from a project root.

    A missing file is not an error: defaults apply. A present but broken
    file is, since silently ignoring it would run a release with the wrong
    branch names.
    """
    path = project_root / CONFIG_FILE_NAME
    if not path.exists():
        return Ok(FlowSettings())
    return load_config(path)
