"""Quiz record model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping

from .errors import RecordValidationError, RepositoryError

__all__ = ["Quiz", "check_content"]


@dataclass
class Quiz:
    """A question/answer pair keyed by a repository-assigned id.

    Instances returned by a repository may be edited in place and handed back
    to ``save`` to persist the change.
    """

    id: int
    question: str
    answer: str

    def to_dict(self) -> MutableMapping[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Quiz":
        try:
            return cls(
                id=int(payload["id"]),
                question=str(payload["question"]),
                answer=str(payload["answer"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RepositoryError(
                f"Malformed quiz entry in store: {dict(payload)!r}"
            ) from exc


def check_content(question: object, answer: object) -> tuple[str, str]:
    """Return trimmed ``(question, answer)`` or raise on empty fields."""

    cleaned_question = str(question if question is not None else "").strip()
    cleaned_answer = str(answer if answer is not None else "").strip()
    messages: list[str] = []
    if not cleaned_question:
        messages.append("question must not be empty.")
    if not cleaned_answer:
        messages.append("answer must not be empty.")
    if messages:
        raise RecordValidationError(messages)
    return cleaned_question, cleaned_answer
