"""Version-control layer.

- Vcs: protocol the lifecycles are written against
- GitVcs: git command-line implementation

Usage:
    from relflow.vcs import GitVcs

    vcs = GitVcs(Path("."))
    if vcs.has_uncommitted_changes().unwrap_or(True):
        print("commit your changes first")
"""

from relflow.vcs.git import GitVcs
from relflow.vcs.protocol import BranchDiverged, Vcs, VcsError, VcsFailure

__all__ = [
    "BranchDiverged",
    "GitVcs",
    "Vcs",
    "VcsError",
    "VcsFailure",
]
