"""Terminal UI for kitpull: prompts behind a swappable Prompter interface."""

from .prompts import PROMPT_STYLE, Prompter, QuestionaryPrompter

__all__ = [
    "PROMPT_STYLE",
    "Prompter",
    "QuestionaryPrompter",
]
