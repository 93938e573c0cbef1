"""Commit and tag message templates.

Templates use ``@{name}`` placeholders, filled from a mapping of message
properties. Unknown placeholders are left untouched so a typo in a template
shows up verbatim in the commit instead of silently disappearing.

Usage:
    render_message("Tag release @{version}", {"version": "1.2.3"})
    # "Tag release 1.2.3"
"""

from __future__ import annotations

import re
from collections.abc import Mapping

__all__ = ["render_message"]

_PLACEHOLDER = re.compile(r"@\{([A-Za-z0-9_.-]+)\}")


def render_message(template: str, properties: Mapping[str, str]) -> str:
    def _replace(m: re.Match[str]) -> str:
        key = m.group(1)
        value = properties.get(key)
        return m.group(0) if value is None else value

    return _PLACEHOLDER.sub(_replace, template)
