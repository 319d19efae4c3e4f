"""Interactive quiz commands.

Each public method of ``QuizCommands`` implements one shell command. They all
run inside ``_command``, which reports failures to the prompt surface and
always hands control back to the prompt loop, whatever happened.
"""

from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from rich.text import Text

from .errors import (
    NotFoundError,
    QuizError,
    RecordValidationError,
    RepositoryError,
)
from .models import Quiz
from .prompt import PromptSurface
from .repository import QuizRepository
from .session import PlaySession, answers_match, run_play_session
from .validation import validate_id

__all__ = ["QuizCommands"]


class QuizCommands:
    """Command operations bound to a repository and a random source."""

    def __init__(
        self,
        repository: QuizRepository,
        *,
        rng: random.Random | None = None,
        logger: logging.Logger | None = None,
        authors: Sequence[str] = (),
    ) -> None:
        self._repository = repository
        self._rng = rng if rng is not None else random.Random()
        self._logger = logger or logging.getLogger("quiz_manager")
        self._authors = tuple(authors)

    def list_quizzes(self, surface: PromptSurface) -> None:
        with self._command(surface, "list"):
            for quiz in self._repository.find_all():
                surface.display(_quiz_line(quiz))

    def show(self, surface: PromptSurface, raw_id: str | None = None) -> None:
        with self._command(surface, "show", raw_id=raw_id):
            quiz = self._fetch(validate_id(raw_id))
            surface.display(_quiz_line(quiz, with_answer=True))

    def add(self, surface: PromptSurface) -> None:
        with self._command(surface, "add"):
            question = surface.ask("Enter a question: ")
            answer = surface.ask("Enter the answer: ")
            quiz = self._repository.create(question, answer)
            self._logger.info("Quiz added", extra={"quiz_id": quiz.id})
            surface.display(
                Text.assemble(
                    ("Added", "magenta"),
                    f": {quiz.question} ",
                    ("=>", "magenta"),
                    f" {quiz.answer}",
                )
            )

    def delete(
        self, surface: PromptSurface, raw_id: str | None = None
    ) -> None:
        with self._command(surface, "delete", raw_id=raw_id):
            quiz_id = validate_id(raw_id)
            removed = self._repository.destroy(quiz_id)
            self._logger.info(
                "Quiz delete requested",
                extra={"quiz_id": quiz_id, "removed": removed},
            )
            if removed:
                surface.display(
                    Text.assemble("Deleted quiz ", (str(quiz_id), "magenta"))
                )
            else:
                surface.display(f"No quiz with id={quiz_id}; nothing deleted.")

    def edit(self, surface: PromptSurface, raw_id: str | None = None) -> None:
        with self._command(surface, "edit", raw_id=raw_id):
            quiz = self._fetch(validate_id(raw_id))
            quiz.question = surface.ask(
                "Enter the question: ", default=quiz.question
            )
            quiz.answer = surface.ask(
                "Enter the answer: ", default=quiz.answer
            )
            self._repository.save(quiz)
            self._logger.info("Quiz edited", extra={"quiz_id": quiz.id})
            surface.display(
                Text.assemble(
                    "Quiz ",
                    (str(quiz.id), "magenta"),
                    f" changed to: {quiz.question} ",
                    ("=>", "magenta"),
                    f" {quiz.answer}",
                )
            )

    def test(self, surface: PromptSurface, raw_id: str | None = None) -> None:
        with self._command(surface, "test", raw_id=raw_id):
            quiz = self._fetch(validate_id(raw_id))
            surface.display(_quiz_line(quiz))
            response = surface.ask("Your answer: ")
            # Feedback only; self-tests never touch any score.
            if answers_match(quiz.answer, response):
                surface.display("Your answer is correct.")
                surface.display_banner("Correct", style="green")
            else:
                surface.display("Your answer is incorrect.")
                surface.display_banner("Incorrect", style="red")

    def play(self, surface: PromptSurface) -> None:
        with self._command(surface, "play"):
            try:
                quizzes = self._repository.find_all()
                fetch_failed = False
            except RepositoryError as exc:
                surface.display_error(str(exc))
                self._logger.warning(
                    "Play session could not load quizzes",
                    extra={"command": "play", "error": str(exc)},
                )
                quizzes = []
                fetch_failed = True

            def report(
                quiz: Quiz, correct: bool, session: PlaySession
            ) -> None:
                if correct:
                    surface.display(f"CORRECT - {session.score} so far.")
                else:
                    surface.display("INCORRECT.")

            result = run_play_session(
                quizzes,
                lambda quiz: surface.ask(f"{quiz.question}? "),
                rng=self._rng,
                on_answer=report,
            )
            if result.outcome == "lost":
                surface.display(f"Game over. Score: {result.score}")
            elif result.outcome == "won":
                surface.display(
                    f"No more questions. Game over. Score: {result.score}"
                )
            elif not fetch_failed:
                surface.display("There are no quizzes to play.")
            surface.display_banner(str(result.score), style="magenta")
            self._logger.info(
                "Play session finished",
                extra={
                    "outcome": result.outcome,
                    "score": result.score,
                    "asked": len(result.asked),
                    "total": result.total,
                },
            )

    def credits(self, surface: PromptSurface) -> None:
        with self._command(surface, "credits"):
            surface.display(Text("Authors:", style="green"))
            for author in self._authors:
                surface.display(Text(author, style="green"))

    def _fetch(self, quiz_id: int) -> Quiz:
        quiz = self._repository.find_by_id(quiz_id)
        if quiz is None:
            raise NotFoundError(quiz_id)
        return quiz

    @contextmanager
    def _command(
        self, surface: PromptSurface, name: str, **fields: Any
    ) -> Iterator[None]:
        extra = {"command": name, **fields}
        self._logger.debug("Command started", extra=extra)
        try:
            yield
        except RecordValidationError as exc:
            surface.display_error("The quiz is invalid:")
            for message in exc.messages:
                surface.display_error(message)
            self._logger.info(
                "Quiz rejected",
                extra={**extra, "messages": list(exc.messages)},
            )
        except QuizError as exc:
            surface.display_error(str(exc))
            self._logger.info(
                "Command failed",
                extra={**extra, "error": type(exc).__name__},
            )
        except (EOFError, KeyboardInterrupt):
            surface.display_error("Input interrupted.")
            self._logger.info("Command interrupted", extra=extra)
        except Exception as exc:
            surface.display_error(str(exc) or type(exc).__name__)
            self._logger.exception("Command crashed", extra=extra)
        else:
            self._logger.debug("Command completed", extra=extra)
        finally:
            surface.resume_prompt()


def _quiz_line(quiz: Quiz, *, with_answer: bool = False) -> Text:
    line = Text.assemble("[", (str(quiz.id), "magenta"), f"] {quiz.question}")
    if with_answer:
        line.append(" ")
        line.append("=>", style="magenta")
        line.append(f" {quiz.answer}")
    return line
