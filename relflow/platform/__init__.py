"""Platform layer: process execution."""

from .process import ProcessError, run, run_live

__all__ = ["ProcessError", "run", "run_live"]
