"""Terminal prompts for interactive lifecycle runs."""

from __future__ import annotations

from collections.abc import Sequence

import typer


class TyperPrompter:
    def ask(self, question: str, default: str) -> str:
        return typer.prompt(question, default=default, show_default=True)

    def choose(self, question: str, choices: Sequence[str]) -> str:
        for i, choice in enumerate(choices, start=1):
            typer.echo(f"  {i}. {choice}")
        while True:
            picked: int = typer.prompt(question, type=int)
            if 1 <= picked <= len(choices):
                return choices[picked - 1]
            typer.echo(f"Enter a number between 1 and {len(choices)}")
