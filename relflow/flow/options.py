"""Per-run options of a lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, fields

from relflow.core.config import OptionDefaults
from relflow.core.version import is_valid_version

__all__ = ["FlowOptions", "validate_options"]

# Goals are split on whitespace and passed to Maven as argv, never through a
# shell; these characters mean the user expected shell semantics.
_SHELL_METACHARACTERS = frozenset("&|;<>`$\n")


@dataclass(frozen=True, slots=True)
class FlowOptions:
    """Options for one lifecycle run.

    The first group mirrors ``OptionDefaults`` (project-wide defaults from
    relflow.toml); the rest only make sense per invocation.
    """

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

    release_version: str | None = None
    development_version: str | None = None
    source_tag: str | None = None
    branch: str | None = None
    tycho_build: bool = False

    @classmethod
    def from_defaults(cls, defaults: OptionDefaults, **overrides: object) -> FlowOptions:
        """Start from project defaults; ``None`` overrides are ignored."""
        values: dict[str, object] = {
            f.name: getattr(defaults, f.name) for f in fields(OptionDefaults)
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]


def validate_options(options: FlowOptions) -> str | None:
    """Return a description of the first invalid option, or None."""
    for name in ("pre_goals", "post_goals"):
        goals: str | None = getattr(options, name)
        if goals is None:
            continue
        if not goals.strip():
            return f"{name} is blank"
        bad = sorted(_SHELL_METACHARACTERS.intersection(goals))
        if bad:
            return f"{name} contains illegal characters: {' '.join(repr(c) for c in bad)}"

    for name in ("release_version", "development_version"):
        version: str | None = getattr(options, name)
        if version is not None and not is_valid_version(version):
            return f"{name} '{version}' is not a valid version"

    if options.version_digit_to_increment is not None and options.version_digit_to_increment < 0:
        return "version_digit_to_increment must be >= 0"

    for name in ("source_tag", "branch"):
        value: str | None = getattr(options, name)
        if value is not None and not value.strip():
            return f"{name} is blank"

    return None
