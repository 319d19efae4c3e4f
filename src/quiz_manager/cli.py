"""``quiz`` entry point."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence


CommandHandler = Callable[[Sequence[str]], int]


@dataclass(frozen=True)
class CommandSpec:
    """Represents a ``quiz`` subcommand."""

    name: str
    summary: str
    handler: CommandHandler


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="shell",
        summary="Start the interactive quiz prompt (default).",
        handler=lambda argv: _run_module_main("quiz_manager.shell", argv),
    ),
    CommandSpec(
        name="init",
        summary="Create the data workspace and a quiz.toml template.",
        handler=lambda argv: _run_module_main(
            "quiz_manager.workspace.cli", argv
        ),
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec for spec in _COMMAND_SPECS
}

_GLOBAL_FLAGS = frozenset({"-h", "--help", "-V", "--version"})


def format_command_table() -> str:
    """Return a formatted command table for help output."""

    width = max(len(spec.name) for spec in _COMMAND_SPECS)
    lines = ["Available commands:"]
    for spec in _COMMAND_SPECS:
        lines.append(f"  {spec.name.ljust(width)}  {spec.summary}")
    return "\n".join(lines)


def format_usage() -> str:
    parts = [
        "Usage: quiz [<command>] [args...]",
        "Run `quiz list` for commands or `quiz help <name>` for details.",
        "",
        format_command_table(),
    ]
    return "\n".join(parts)


def _print(
    text: str, *, stream: Optional[Callable[[str], None]] = None
) -> None:
    target = stream if stream is not None else sys.stdout.write
    if text:
        target(text + "\n")


def _handle_version() -> int:
    try:
        version = metadata.version("quiz-manager")
    except metadata.PackageNotFoundError:
        version = "unknown"
    _print(version)
    return 0


def _handle_help(argv: Sequence[str]) -> int:
    if not argv:
        _print(format_usage())
        return 0

    spec = COMMANDS.get(argv[0])
    if not spec:
        _print(f"Unknown command '{argv[0]}'.", stream=sys.stderr.write)
        _print(format_command_table(), stream=sys.stderr.write)
        return 2

    _print(f"{spec.name}: {spec.summary}")
    _print("Run `quiz {0} --help` for command options.".format(spec.name))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])

    # Bare ``quiz`` and option-only invocations go straight to the shell.
    if not args or (
        args[0].startswith("-") and args[0] not in _GLOBAL_FLAGS
    ):
        return COMMANDS["shell"].handler(args)

    head, *tail = args

    if head in ("-h", "--help"):
        _print(format_usage())
        return 0

    if head in ("-V", "--version", "version"):
        return _handle_version()

    if head == "list":
        _print(format_command_table())
        return 0

    if head == "help":
        return _handle_help(tail)

    spec = COMMANDS.get(head)
    if spec:
        return spec.handler(tail)

    _print(f"Unknown command '{head}'.", stream=sys.stderr.write)
    _print(format_command_table(), stream=sys.stderr.write)
    return 2


def _run_module_main(module_name: str, argv: Sequence[str]) -> int:
    """Import ``module_name`` lazily and run its ``main(argv)``.

    argparse reports usage errors and ``--help`` through ``SystemExit``;
    those become plain exit codes.
    """

    module = import_module(module_name)
    try:
        return module.main(list(argv))
    except SystemExit as exc:
        return _normalize_system_exit(exc)


def _normalize_system_exit(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _print(str(code), stream=sys.stderr.write)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
