"""Line-based prompt surface rendered with Rich."""

from __future__ import annotations

import sys
from typing import Callable, Protocol

from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.text import Text

__all__ = [
    "InputProvider",
    "PromptSurface",
    "ConsolePrompt",
]

InputProvider = Callable[[str], str]


class PromptSurface(Protocol):
    """What a command needs to talk to the user."""

    def ask(self, text: str, *, default: str | None = None) -> str:
        """Prompt for one line and return it trimmed."""

    def display(self, line: RenderableType) -> None:
        """Print a line of regular output."""

    def display_error(self, message: str) -> None:
        """Print a line of error output."""

    def display_banner(self, text: str, *, style: str = "magenta") -> None:
        """Print ``text`` prominently."""

    def resume_prompt(self) -> None:
        """Signal that the current command finished."""


class ConsolePrompt:
    """Prompt surface backed by a Rich console.

    ``input_provider`` receives the plain prompt text and returns the raw
    line; it defaults to ``Console.input`` so the prompt is styled. When the
    console is an interactive terminal, ``ask(default=...)`` pre-fills the
    editable line through ``readline``.
    """

    def __init__(
        self,
        console: Console,
        *,
        input_provider: InputProvider | None = None,
        prompt_text: str = "quiz > ",
    ) -> None:
        self._console = console
        self._prompt_text = prompt_text
        self._provider = input_provider
        self._interactive = (
            input_provider is None
            and console.is_terminal
            and sys.stdin.isatty()
        )
        self._in_command = False

    @property
    def console(self) -> Console:
        return self._console

    @property
    def in_command(self) -> bool:
        """``True`` between ``read_command`` and ``resume_prompt``."""

        return self._in_command

    def read_command(self) -> str:
        """Show the shell prompt and return the next command line."""

        line = self._read(self._prompt_text, style="bold blue")
        self._in_command = True
        return line

    def ask(self, text: str, *, default: str | None = None) -> str:
        if default is not None and self._interactive:
            return self._prefilled_input(text, default).strip()
        return self._read(text).strip()

    def display(self, line: RenderableType) -> None:
        self._console.print(line)

    def display_error(self, message: str) -> None:
        self._console.print(Text(message, style="bold red"))

    def display_banner(self, text: str, *, style: str = "magenta") -> None:
        self._console.print(
            Panel(
                Text(text, style=f"bold {style}", justify="center"),
                border_style=style,
                expand=False,
            )
        )

    def resume_prompt(self) -> None:
        self._in_command = False

    def _read(self, prompt: str, *, style: str = "bold red") -> str:
        if self._provider is not None:
            return self._provider(prompt)
        return self._console.input(Text(prompt, style=style))

    def _prefilled_input(self, prompt: str, default: str) -> str:
        try:
            import readline
        except ImportError:  # pragma: no cover - platform without readline
            return self._read(prompt)
        readline.set_startup_hook(lambda: readline.insert_text(default))
        try:
            return self._read(prompt)
        finally:
            readline.set_startup_hook()
