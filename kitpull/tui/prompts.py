"""Interactive prompts.

questionary drives the prompts when a TTY is available; click is the
fallback for confirmations and text input in headless runs. A cancelled
prompt (Ctrl+C, EOF) always raises UserCancelled.
"""

import sys
from abc import ABC, abstractmethod

import click
import questionary
from prompt_toolkit.styles import Style

from kitpull.errors import KitpullError, UserCancelled

PROMPT_STYLE = Style(
    [
        ("qmark", "fg:ansicyan bold"),
        ("highlighted", "bold"),
    ]
)


class Prompter(ABC):
    """Interface for operator interaction."""

    @abstractmethod
    def select_many(self, message: str, choices: list[str]) -> list[str]:
        """Return the chosen subset of choices."""

    @abstractmethod
    def select_one(self, message: str, choices: list[str], default: str | None = None) -> str:
        """Return one of choices."""

    @abstractmethod
    def text(self, message: str, default: str = "") -> str:
        """Return free-form input."""

    @abstractmethod
    def confirm(self, message: str, details: list[str] | None = None) -> bool:
        """Return the operator's yes/no answer."""


def _require_answer(answer):
    if answer is None:
        raise UserCancelled()
    return answer


class QuestionaryPrompter(Prompter):
    def _require_tty(self, what: str) -> None:
        if not sys.stdin.isatty():
            raise KitpullError(f"Interactive {what} requires a TTY")

    def select_many(self, message: str, choices: list[str]) -> list[str]:
        self._require_tty("selection")
        try:
            answer = questionary.checkbox(
                message,
                choices=choices,
                instruction="Space to toggle, Enter to confirm",
                style=PROMPT_STYLE,
            ).ask()
        except KeyboardInterrupt:
            answer = None
        return _require_answer(answer)

    def select_one(self, message: str, choices: list[str], default: str | None = None) -> str:
        self._require_tty("selection")
        try:
            answer = questionary.select(
                message, choices=choices, default=default, style=PROMPT_STYLE
            ).ask()
        except KeyboardInterrupt:
            answer = None
        return _require_answer(answer)

    def text(self, message: str, default: str = "") -> str:
        if not sys.stdin.isatty():
            try:
                return click.prompt(message, default=default, show_default=bool(default))
            except click.Abort:
                raise UserCancelled()
        try:
            answer = questionary.text(message, default=default, style=PROMPT_STYLE).ask()
        except KeyboardInterrupt:
            answer = None
        return _require_answer(answer)

    def confirm(self, message: str, details: list[str] | None = None) -> bool:
        if details:
            for line in details:
                click.secho(f"  {line}", fg="yellow")

        if not sys.stdin.isatty():
            try:
                return click.confirm(message, default=True)
            except click.Abort:
                raise UserCancelled()

        try:
            answer = questionary.confirm(message, default=True, style=PROMPT_STYLE).ask()
        except KeyboardInterrupt:
            answer = None
        return _require_answer(answer)


__all__ = ["Prompter", "QuestionaryPrompter", "PROMPT_STYLE"]
