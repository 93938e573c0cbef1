"""Build-tool layer.

- Builder: protocol the lifecycles are written against
- MavenBuilder: Maven command-line implementation
"""

from relflow.build.maven import MavenBuilder
from relflow.build.protocol import Builder, BuildError

__all__ = ["BuildError", "Builder", "MavenBuilder"]
