from __future__ import annotations

import io

from rich.console import Console

from quiz_manager.prompt import ConsolePrompt


def make_console() -> Console:
    return Console(file=io.StringIO(), record=True, width=80)


def scripted(*answers: str):
    pending = list(answers)
    seen: list[str] = []

    def provider(prompt: str) -> str:
        seen.append(prompt)
        return pending.pop(0)

    return provider, seen


def test_read_command_marks_command_in_progress() -> None:
    provider, seen = scripted("list")
    surface = ConsolePrompt(
        make_console(), input_provider=provider, prompt_text="quiz > "
    )

    assert surface.in_command is False
    assert surface.read_command() == "list"
    assert surface.in_command is True
    surface.resume_prompt()
    assert surface.in_command is False
    assert seen == ["quiz > "]


def test_ask_trims_and_ignores_default_without_terminal() -> None:
    provider, seen = scripted("  Rome  ")
    surface = ConsolePrompt(make_console(), input_provider=provider)

    assert surface.ask("Enter the answer: ", default="Paris") == "Rome"
    assert seen == ["Enter the answer: "]


def test_output_helpers_render_to_console() -> None:
    console = make_console()
    surface = ConsolePrompt(console, input_provider=lambda _prompt: "")

    surface.display("[1] a [bold]question[/bold]")
    surface.display_error("No quiz found for id=3.")
    surface.display_banner("7")

    text = console.export_text()
    assert "No quiz found for id=3." in text
    assert "7" in text
    assert "question" in text


def test_error_text_is_not_parsed_as_markup() -> None:
    console = make_console()
    surface = ConsolePrompt(console, input_provider=lambda _prompt: "")

    surface.display_error("Unknown command: '[red]x'.")

    assert "Unknown command: '[red]x'." in console.export_text()
