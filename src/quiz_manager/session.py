"""Randomized play sessions over the whole quiz set.

A session draws quizzes without replacement and keeps going while the
answers are right. The first wrong answer ends it; running out of quizzes
ends it as a win. State lives in a ``PlaySession`` owned by a single
``run_play_session`` call, and the random source is injected so tests can
pin the question order.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Callable, Literal

from .models import Quiz

__all__ = [
    "Outcome",
    "PlayResult",
    "PlaySession",
    "answers_match",
    "run_play_session",
]

Outcome = Literal["won", "lost", "empty"]
AnswerProvider = Callable[[Quiz], str]
AnswerCallback = Callable[[Quiz, bool, "PlaySession"], None]


def answers_match(expected: str, response: str) -> bool:
    """Compare answers ignoring surrounding whitespace and case."""

    return response.strip().casefold() == expected.strip().casefold()


@dataclass(frozen=True)
class PlayResult:
    """Final state of a finished play session."""

    score: int
    outcome: Outcome
    asked: tuple[int, ...]
    total: int


@dataclass
class PlaySession:
    """Mutable state of one play session."""

    remaining: list[Quiz]
    total: int
    score: int = 0
    asked: list[int] = field(default_factory=list)
    outcome: Outcome | None = None

    @classmethod
    def start(cls, quizzes: Sequence[Quiz]) -> "PlaySession":
        return cls(remaining=list(quizzes), total=len(quizzes))

    @property
    def finished(self) -> bool:
        return self.outcome is not None

    def draw(self, rng: random.Random) -> Quiz | None:
        """Remove and return a random pending quiz.

        Returns ``None`` once the session is over; an empty pending set
        finishes the session on the spot.
        """

        if self.finished:
            return None
        if not self.remaining:
            self.outcome = "won" if self.asked else "empty"
            return None
        quiz = self.remaining.pop(rng.randrange(len(self.remaining)))
        self.asked.append(quiz.id)
        return quiz

    def answer(self, quiz: Quiz, response: str) -> bool:
        if self.finished:
            raise RuntimeError("Cannot answer a finished play session.")
        if answers_match(quiz.answer, response):
            self.score += 1
            return True
        self.outcome = "lost"
        self.remaining.clear()
        return False

    def result(self) -> PlayResult:
        if self.outcome is None:
            raise RuntimeError("Play session is still in progress.")
        return PlayResult(
            score=self.score,
            outcome=self.outcome,
            asked=tuple(self.asked),
            total=self.total,
        )


def run_play_session(
    quizzes: Sequence[Quiz],
    ask: AnswerProvider,
    *,
    rng: random.Random | None = None,
    on_answer: AnswerCallback | None = None,
) -> PlayResult:
    """Ask every quiz once in random order until one is answered wrong.

    ``ask`` is called with the drawn quiz and returns the user's response;
    ``on_answer`` is told whether each response was right.
    """

    session = PlaySession.start(quizzes)
    source = rng if rng is not None else random.Random()
    while True:
        quiz = session.draw(source)
        if quiz is None:
            break
        correct = session.answer(quiz, ask(quiz))
        if on_answer is not None:
            on_answer(quiz, correct, session)
    return session.result()
