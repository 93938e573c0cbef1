"""Version derivation for release lifecycles.

A project version such as ``1.2.3-SNAPSHOT`` is split into its numeric
digits and a trailing qualifier. Lifecycles never edit a version in place:
each milestone derives a fresh string from the parsed form.

Usage:
    match parse_version("1.2.3-SNAPSHOT"):
        case Ok(info):
            info.release_version_string()   # "1.2.3"
            info.next_snapshot_version()    # "1.2.4-SNAPSHOT"
            info.next_snapshot_version(0)   # "2.0.0-SNAPSHOT"
        case Err(error):
            print(error.message)

Qualifiers are opaque text. The only structure read out of them is a
trailing revision number (``RC1`` -> ``RC2``) and the snapshot marker.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from relflow.core.result import Err, Ok, Result

__all__ = [
    "SNAPSHOT_SUFFIX",
    "InvalidVersion",
    "VersionInfo",
    "is_snapshot_version",
    "is_valid_version",
    "parse_version",
    "strip_snapshot",
]

SNAPSHOT_SUFFIX = "-SNAPSHOT"

_NUMERIC_PREFIX = re.compile(r"^\d+(?:\.\d+)*")
# A separator followed by a letter (-RC1, .RELEASE, alpha) or a separator
# followed by a build number (-1, _2).
_QUALIFIER = re.compile(r"^(?:[-_.+]?[A-Za-z][A-Za-z0-9._+-]*|[-_+]\d[A-Za-z0-9._+-]*)?$")
_ANNOTATION = re.compile(r"^[-_.+]?(?P<annotation>[A-Za-z]*)[-_.]?(?P<revision>\d*)$")


@dataclass(frozen=True, slots=True)
class InvalidVersion:
    """A version string that could not be parsed.

    Attributes:
        raw: The rejected input
        message: Why it was rejected
    """

    raw: str
    message: str


@dataclass(frozen=True, slots=True)
class VersionInfo:
    """A parsed version: numeric digits plus an opaque qualifier.

    Attributes:
        digits: Numeric components, never empty (``(1, 2, 3)`` for ``1.2.3``)
        qualifier: Everything after the digits, separator included
            (``"-SNAPSHOT"``, ``"-RC1"``, ``""``)
    """

    digits: tuple[int, ...]
    qualifier: str = ""

    def __post_init__(self) -> None:
        if not self.digits:
            raise ValueError("a version needs at least one digit")
        if any(d < 0 for d in self.digits):
            raise ValueError(f"negative version digit in {self.digits}")

    def __str__(self) -> str:
        return _join(self.digits) + self.qualifier

    @property
    def is_snapshot(self) -> bool:
        return self.qualifier.endswith(SNAPSHOT_SUFFIX)

    @property
    def base_qualifier(self) -> str:
        """Qualifier without the snapshot marker."""
        if self.is_snapshot:
            return self.qualifier[: -len(SNAPSHOT_SUFFIX)]
        return self.qualifier

    @property
    def annotation(self) -> str | None:
        """Alphabetic part of the qualifier (``RC`` for ``-RC1``), if any."""
        m = _ANNOTATION.match(self.base_qualifier)
        if m is None or not m.group("annotation"):
            return None
        return m.group("annotation")

    @property
    def annotation_revision(self) -> int | None:
        """Trailing number of the qualifier (``1`` for ``-RC1``), if any."""
        m = _ANNOTATION.match(self.base_qualifier)
        if m is None or not m.group("revision"):
            return None
        return int(m.group("revision"))

    def release_version_string(self) -> str:
        """Numeric-only form: ``1.2.3-SNAPSHOT`` and ``1.2.3-RC1`` give ``1.2.3``."""
        return _join(self.digits)

    def snapshot_version_string(self) -> str:
        return _join(self.digits) + self.base_qualifier + SNAPSHOT_SUFFIX

    def next_version(self) -> VersionInfo:
        """Increment the final digit; the qualifier is kept as is."""
        digits = (*self.digits[:-1], self.digits[-1] + 1)
        return VersionInfo(digits=digits, qualifier=self.qualifier)

    def next_snapshot_version(self, digit: int | None = None) -> str:
        """Next development version.

        Without ``digit`` the qualifier revision is bumped when there is one
        (``1.0-RC1`` -> ``1.0-RC2-SNAPSHOT``), otherwise the last digit.

        With ``digit`` (zero-based) that component is incremented and every
        component to its right is reset to zero. A version with fewer
        components is first padded with zeros to exactly ``digit + 1``
        components, so ``1.2`` with ``digit=2`` gives ``1.2.1-SNAPSHOT``.

        Raises:
            ValueError: If ``digit`` is negative.
        """
        if digit is None:
            revision = self.annotation_revision
            if revision is not None:
                return _join(self.digits) + _bump_revision(self.base_qualifier) + SNAPSHOT_SUFFIX
            return self.next_version().snapshot_version_string()

        if digit < 0:
            raise ValueError(f"digit to increment must be >= 0, got {digit}")

        digits = list(_pad(self.digits, digit + 1))
        digits[digit] += 1
        for i in range(digit + 1, len(digits)):
            digits[i] = 0
        return _join(digits) + self.base_qualifier + SNAPSHOT_SUFFIX

    def digits_version_info(self) -> VersionInfo:
        """Drop non-numeric qualifier text, keeping a trailing revision.

        ``1.0-alpha`` -> ``1.0``, ``1.0-RC2-SNAPSHOT`` -> ``1.0-2``.
        """
        revision = self.annotation_revision
        qualifier = f"-{revision}" if revision is not None else ""
        return VersionInfo(digits=self.digits, qualifier=qualifier)

    def padded_version(self, min_digits: int) -> str:
        """Right-pad digits with zeros up to ``min_digits``; never truncates."""
        return _join(_pad(self.digits, min_digits)) + self.qualifier


def parse_version(raw: str) -> Result[VersionInfo, InvalidVersion]:
    """Parse a version string.

    Returns:
        Ok(VersionInfo) on success
        Err(InvalidVersion) for blank input, a missing numeric prefix, an
        empty component (``1..2``) or a qualifier with unsafe characters
    """
    text = raw.strip()
    if not text:
        return Err(InvalidVersion(raw=raw, message="version is blank"))

    m = _NUMERIC_PREFIX.match(text)
    if m is None:
        return Err(InvalidVersion(raw=raw, message=f"version must start with a number: {raw!r}"))

    qualifier = text[m.end() :]
    if not _QUALIFIER.match(qualifier):
        return Err(InvalidVersion(raw=raw, message=f"invalid version qualifier in {raw!r}"))

    digits = tuple(int(part) for part in m.group(0).split("."))
    return Ok(VersionInfo(digits=digits, qualifier=qualifier))


def is_valid_version(raw: str) -> bool:
    return isinstance(parse_version(raw), Ok)


def is_snapshot_version(raw: str) -> bool:
    return raw.strip().endswith(SNAPSHOT_SUFFIX)


def strip_snapshot(raw: str) -> str:
    """Remove a trailing ``-SNAPSHOT`` from a raw version string."""
    text = raw.strip()
    if text.endswith(SNAPSHOT_SUFFIX):
        return text[: -len(SNAPSHOT_SUFFIX)]
    return text


def _join(digits: tuple[int, ...] | list[int]) -> str:
    return ".".join(str(d) for d in digits)


def _pad(digits: tuple[int, ...], count: int) -> tuple[int, ...]:
    if len(digits) >= count:
        return digits
    return digits + (0,) * (count - len(digits))


def _bump_revision(qualifier: str) -> str:
    m = re.search(r"\d+$", qualifier)
    if m is None:
        return qualifier
    number = m.group(0)
    bumped = str(int(number) + 1).zfill(len(number))
    return qualifier[: m.start()] + bumped
