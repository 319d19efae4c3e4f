"""Interactive quiz shell: command table, prompt loop and entry point."""

from __future__ import annotations

import argparse
import logging
import os
import random
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from dotenv import load_dotenv
from rich.console import Console

from .commands import QuizCommands
from .core.config import ConfigError, QuizConfig, load_config
from .core.logging import configure_logger
from .core.workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)
from .errors import RepositoryError
from .prompt import ConsolePrompt, InputProvider
from .repository import JsonQuizRepository

__all__ = [
    "ShellCommand",
    "SHELL_COMMANDS",
    "QuizShell",
    "format_help",
    "parse_command_line",
    "main",
]


@dataclass(frozen=True)
class ShellCommand:
    """A command accepted at the quiz prompt."""

    name: str
    usage: str
    summary: str
    aliases: tuple[str, ...] = ()
    takes_id: bool = False


SHELL_COMMANDS: Sequence[ShellCommand] = (
    ShellCommand("help", "h|help", "Show this help.", aliases=("h",)),
    ShellCommand("list", "list", "List the existing quizzes."),
    ShellCommand(
        "show",
        "show <id>",
        "Show the question and the answer of a quiz.",
        takes_id=True,
    ),
    ShellCommand("add", "add", "Add a new quiz interactively."),
    ShellCommand(
        "delete", "delete <id>", "Delete a quiz.", takes_id=True
    ),
    ShellCommand("edit", "edit <id>", "Edit a quiz.", takes_id=True),
    ShellCommand(
        "test", "test <id>", "Answer a single quiz.", takes_id=True
    ),
    ShellCommand(
        "play",
        "p|play",
        "Answer every quiz in random order.",
        aliases=("p",),
    ),
    ShellCommand("credits", "credits", "Show the authors."),
    ShellCommand("quit", "q|quit", "Exit the program.", aliases=("q",)),
)

_BY_NAME: Mapping[str, ShellCommand] = {
    key: spec
    for spec in SHELL_COMMANDS
    for key in (spec.name, *spec.aliases)
}


def parse_command_line(line: str) -> tuple[str, Optional[str]]:
    """Split ``line`` into a lower-cased command word and its argument.

    Only the first word after the command is kept; an empty line yields
    ``("", None)``.
    """

    words = line.split()
    if not words:
        return "", None
    argument = words[1] if len(words) > 1 else None
    return words[0].lower(), argument


def format_help() -> list[str]:
    width = max(len(spec.usage) for spec in SHELL_COMMANDS)
    lines = ["Commands:"]
    for spec in SHELL_COMMANDS:
        lines.append(f"  {spec.usage.ljust(width)}  {spec.summary}")
    return lines


class QuizShell:
    """Read command lines and dispatch them one at a time."""

    def __init__(
        self,
        commands: QuizCommands,
        surface: ConsolePrompt,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._commands = commands
        self._surface = surface
        self._logger = logger or logging.getLogger("quiz_manager")
        self._handlers: Mapping[str, Callable[[Optional[str]], None]] = {
            "list": lambda _arg: commands.list_quizzes(surface),
            "show": lambda arg: commands.show(surface, arg),
            "add": lambda _arg: commands.add(surface),
            "delete": lambda arg: commands.delete(surface, arg),
            "edit": lambda arg: commands.edit(surface, arg),
            "test": lambda arg: commands.test(surface, arg),
            "play": lambda _arg: commands.play(surface),
            "credits": lambda _arg: commands.credits(surface),
        }

    def dispatch(self, line: str) -> bool:
        """Run the command on ``line``; return ``False`` when asked to quit."""

        word, argument = parse_command_line(line)
        spec = _BY_NAME.get(word)
        if spec is None:
            if word:
                self._surface.display_error(f"Unknown command: '{word}'.")
                self._surface.display("Use 'help' to list commands.")
                self._logger.info(
                    "Unknown command", extra={"command": word}
                )
            self._surface.resume_prompt()
            return True
        if spec.name == "quit":
            self._surface.resume_prompt()
            return False
        if spec.name == "help":
            for text in format_help():
                self._surface.display(text)
            self._surface.resume_prompt()
            return True
        self._handlers[spec.name](argument)
        return True

    def run(self) -> int:
        surface = self._surface
        surface.display_banner("Quiz Manager", style="green")
        while True:
            try:
                line = surface.read_command()
            except (EOFError, KeyboardInterrupt):
                surface.display("")
                break
            if not self.dispatch(line):
                break
            if surface.in_command:
                self._logger.error(
                    "Command returned without resuming the prompt",
                    extra={"line": line},
                )
                surface.resume_prompt()
        surface.display("Bye!")
        self._logger.debug("Quiz shell closed")
        return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz shell",
        description="Manage and play question/answer quizzes interactively.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to quiz.toml (defaults to QUIZ_MANAGER_CONFIG or the "
        "workspace copy).",
    )
    parser.add_argument(
        "--data-home",
        type=Path,
        help="Override the workspace root (defaults to "
        "QUIZ_MANAGER_DATA_HOME or ~/.quiz-manager-data).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed the question order of play sessions.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )
    return parser


def _prepare_workspace(
    args: argparse.Namespace,
) -> tuple[WorkspaceLayout, QuizConfig]:
    initial = ensure_workspace(path=args.data_home, create=False)
    config = load_config(
        explicit_path=args.config,
        config_dir=initial.path_for("config"),
    )
    home = args.data_home
    env_home = (os.environ.get(WORKSPACE_ENV) or "").strip()
    if home is None and not env_home:
        home = config.paths.data_home
    return ensure_workspace(path=home), config


def main(
    argv: Sequence[str] | None = None,
    *,
    console: Console | None = None,
    input_provider: InputProvider | None = None,
) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    load_dotenv(override=False)
    try:
        layout, config = _prepare_workspace(args)
    except (ConfigError, WorkspaceError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2

    logger, log_path = configure_logger(
        "quiz_manager",
        log_dir=layout.path_for("logs"),
        level=config.logging.level,
        verbose=args.verbose or config.logging.verbose,
        filename="quiz.log",
    )

    repository = JsonQuizRepository(
        layout.path_for("data") / config.store.filename,
        seed_defaults=config.store.seed_defaults,
    )
    try:
        created = repository.initialize()
    except RepositoryError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    seed = args.seed if args.seed is not None else config.play.seed
    logger.info(
        "Quiz shell started",
        extra={
            "store": repository.path,
            "store_created": created,
            "seed": seed,
            "log_path": log_path,
        },
    )

    commands = QuizCommands(
        repository,
        rng=random.Random(seed),
        logger=logger,
        authors=config.credits.authors,
    )
    surface = ConsolePrompt(
        console or Console(),
        input_provider=input_provider,
        prompt_text=config.shell.prompt,
    )
    return QuizShell(commands, surface, logger=logger).run()


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
