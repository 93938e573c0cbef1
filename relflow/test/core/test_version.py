"""Tests for core/version.py."""

from __future__ import annotations

import pytest

from relflow.core.result import Err, Ok
from relflow.core.version import (
    VersionInfo,
    is_snapshot_version,
    is_valid_version,
    parse_version,
    strip_snapshot,
)


def parse(raw: str) -> VersionInfo:
    result = parse_version(raw)
    assert isinstance(result, Ok), raw
    return result.value


class TestParseVersion:
    """Tests for parse_version()."""

    def test_plain_digits(self) -> None:
        info = parse("1.2.3")
        assert info.digits == (1, 2, 3)
        assert info.qualifier == ""

    def test_snapshot_qualifier(self) -> None:
        info = parse("1.2.3-SNAPSHOT")
        assert info.digits == (1, 2, 3)
        assert info.qualifier == "-SNAPSHOT"
        assert info.is_snapshot is True
        assert info.base_qualifier == ""

    def test_annotated_qualifier(self) -> None:
        info = parse("2.0-RC1-SNAPSHOT")
        assert info.annotation == "RC"
        assert info.annotation_revision == 1
        assert info.base_qualifier == "-RC1"

    def test_surrounding_whitespace_ignored(self) -> None:
        assert str(parse("  1.0  ")) == "1.0"

    def test_str_roundtrips_input(self) -> None:
        for raw in ("1", "1.0.0", "1.0-RC1", "3.2.1.Final", "1.0_beta2", "4.1-2"):
            assert str(parse(raw)) == raw

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "v1.0", "1..2", "1.2.", "1.0 beta", "1.0;rm"])
    def test_invalid(self, raw: str) -> None:
        result = parse_version(raw)
        assert isinstance(result, Err)
        assert result.error.raw == raw
        assert is_valid_version(raw) is False


class TestVersionInfo:
    """Tests for VersionInfo derivations."""

    def test_rejects_empty_digits(self) -> None:
        with pytest.raises(ValueError):
            VersionInfo(digits=())

    def test_rejects_negative_digits(self) -> None:
        with pytest.raises(ValueError):
            VersionInfo(digits=(1, -1))

    def test_release_version_string_strips_qualifier(self) -> None:
        assert parse("1.2.3-SNAPSHOT").release_version_string() == "1.2.3"
        assert parse("1.2.3-RC1").release_version_string() == "1.2.3"
        assert parse("1.2.3").release_version_string() == "1.2.3"

    def test_release_version_string_is_a_valid_version(self) -> None:
        for raw in ("1.0-SNAPSHOT", "0.9.1-beta-SNAPSHOT", "7"):
            assert is_valid_version(parse(raw).release_version_string())

    def test_snapshot_version_string(self) -> None:
        assert parse("1.2").snapshot_version_string() == "1.2-SNAPSHOT"
        assert parse("1.2-SNAPSHOT").snapshot_version_string() == "1.2-SNAPSHOT"
        assert parse("1.2-RC1").snapshot_version_string() == "1.2-RC1-SNAPSHOT"

    def test_next_version_bumps_last_digit(self) -> None:
        assert str(parse("1.2.3").next_version()) == "1.2.4"
        assert str(parse("1.9").next_version()) == "1.10"

    def test_next_snapshot_version_default(self) -> None:
        assert parse("1.2.3").next_snapshot_version() == "1.2.4-SNAPSHOT"
        assert parse("1.2.3-SNAPSHOT").next_snapshot_version() == "1.2.4-SNAPSHOT"

    def test_next_snapshot_version_bumps_annotation_revision(self) -> None:
        assert parse("1.0-RC1").next_snapshot_version() == "1.0-RC2-SNAPSHOT"
        assert parse("1.0-RC09").next_snapshot_version() == "1.0-RC10-SNAPSHOT"

    def test_next_snapshot_version_always_snapshot(self) -> None:
        for raw in ("1", "1.0-alpha", "2.0-RC3", "1.0.0.1"):
            assert is_snapshot_version(parse(raw).next_snapshot_version())

    def test_next_snapshot_version_with_digit(self) -> None:
        assert parse("1.2.3").next_snapshot_version(0) == "2.0.0-SNAPSHOT"
        assert parse("1.2.3").next_snapshot_version(1) == "1.3.0-SNAPSHOT"
        assert parse("1.2.3").next_snapshot_version(2) == "1.2.4-SNAPSHOT"

    def test_next_snapshot_version_pads_short_version(self) -> None:
        assert parse("1.2").next_snapshot_version(2) == "1.2.1-SNAPSHOT"
        assert parse("1").next_snapshot_version(3) == "1.0.0.1-SNAPSHOT"

    def test_next_snapshot_version_negative_digit(self) -> None:
        with pytest.raises(ValueError):
            parse("1.2.3").next_snapshot_version(-1)

    def test_digits_version_info(self) -> None:
        assert str(parse("1.0-alpha").digits_version_info()) == "1.0"
        assert str(parse("1.0-RC2-SNAPSHOT").digits_version_info()) == "1.0-2"
        assert str(parse("3.4.5").digits_version_info()) == "3.4.5"

    def test_padded_version(self) -> None:
        assert parse("1").padded_version(3) == "1.0.0"
        assert parse("1.2-2").padded_version(3) == "1.2.0-2"
        assert parse("1.2.3.4").padded_version(3) == "1.2.3.4"


class TestHelpers:
    """Tests for string-level helpers."""

    def test_is_snapshot_version(self) -> None:
        assert is_snapshot_version("1.0-SNAPSHOT") is True
        assert is_snapshot_version("1.0") is False

    def test_strip_snapshot(self) -> None:
        assert strip_snapshot("1.0-SNAPSHOT") == "1.0"
        assert strip_snapshot("1.0-RC1") == "1.0-RC1"
