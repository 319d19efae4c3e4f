"""Errors raised by quiz commands and the quiz repository.

Every error here is recoverable: command operations catch them, report them
to the user and hand control back to the prompt loop.
"""

from __future__ import annotations

from typing import Iterable

__all__ = [
    "QuizError",
    "MissingParameterError",
    "NotANumberError",
    "NotFoundError",
    "RecordValidationError",
    "RepositoryError",
]


class QuizError(RuntimeError):
    """Base class for user-facing quiz failures."""


class MissingParameterError(QuizError):
    """Raised when a command needs an ``<id>`` argument and got none."""

    def __init__(self, name: str = "id") -> None:
        super().__init__(f"Missing parameter <{name}>.")
        self.name = name


class NotANumberError(QuizError):
    """Raised when an ``<id>`` argument is not an integer."""

    def __init__(self, raw: str, name: str = "id") -> None:
        super().__init__(f"The value of parameter <{name}> is not a number.")
        self.raw = raw
        self.name = name


class NotFoundError(QuizError):
    """Raised when no quiz matches a well-formed identifier."""

    def __init__(self, quiz_id: int) -> None:
        super().__init__(f"No quiz found for id={quiz_id}.")
        self.quiz_id = quiz_id


class RecordValidationError(QuizError):
    """Raised when quiz content is rejected; one message per field."""

    def __init__(self, messages: Iterable[str]) -> None:
        self.messages = tuple(messages)
        super().__init__("The quiz is invalid: " + " ".join(self.messages))


class RepositoryError(QuizError):
    """Raised when the quiz store cannot be read or written."""
