"""Interactive command-line quiz manager."""

from .commands import QuizCommands
from .errors import (
    MissingParameterError,
    NotANumberError,
    NotFoundError,
    QuizError,
    RecordValidationError,
    RepositoryError,
)
from .models import Quiz
from .prompt import ConsolePrompt, PromptSurface
from .repository import JsonQuizRepository, QuizRepository
from .session import PlayResult, PlaySession, answers_match, run_play_session
from .validation import validate_id

__all__ = [
    "QuizCommands",
    "QuizError",
    "MissingParameterError",
    "NotANumberError",
    "NotFoundError",
    "RecordValidationError",
    "RepositoryError",
    "Quiz",
    "ConsolePrompt",
    "PromptSurface",
    "JsonQuizRepository",
    "QuizRepository",
    "PlayResult",
    "PlaySession",
    "answers_match",
    "run_play_session",
    "validate_id",
]
