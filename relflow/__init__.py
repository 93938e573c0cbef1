"""relflow - git-flow release lifecycles for Maven projects."""

__version__ = "0.1.0"
