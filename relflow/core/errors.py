"""Error codes for CLI exit status.

Each failure category of a lifecycle run maps to one process exit code so
that scripts driving relflow can tell a dirty working copy from a broken
build without parsing output.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: Configuration error (bad option, invalid version, bad relflow.toml)
    - 2: Environment error (git or mvn missing, not a project directory)
    - 3: Build error (tests, install or custom goals failed)
    - 4: External error (git/Maven process or network failure)
    - 5: I/O error (file not found, permission denied)
    - 6: Precondition failed (dirty working copy, missing or ambiguous branch)
    - 7: Divergence (local and remote branch disagree)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    EXTERNAL_ERROR = 4
    IO_ERROR = 5
    PRECONDITION_FAILED = 6
    DIVERGED = 7

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
