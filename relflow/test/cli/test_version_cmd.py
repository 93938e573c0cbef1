from __future__ import annotations

import pytest
import typer

from relflow.core.errors import ErrorCode


def test_next_version(capsys: pytest.CaptureFixture[str]) -> None:
    from relflow.cli.commands.version_cmd import next_version

    next_version(version="1.2.3", digit=None, digits_only=False)

    assert capsys.readouterr().out.strip() == "1.2.4-SNAPSHOT"


def test_next_version_with_digit_and_digits_only(capsys: pytest.CaptureFixture[str]) -> None:
    from relflow.cli.commands.version_cmd import next_version

    next_version(version="1.2-alpha", digit=0, digits_only=True)

    assert capsys.readouterr().out.strip() == "2.0-SNAPSHOT"


def test_release_version(capsys: pytest.CaptureFixture[str]) -> None:
    from relflow.cli.commands.version_cmd import release_version

    release_version(version="4.1.0-SNAPSHOT")

    assert capsys.readouterr().out.strip() == "4.1.0"


def test_invalid_version_exits() -> None:
    from relflow.cli.commands.version_cmd import next_version

    with pytest.raises(typer.Exit) as exc:
        next_version(version="latest", digit=None, digits_only=False)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
