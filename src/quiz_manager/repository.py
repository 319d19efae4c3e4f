"""Quiz persistence: repository protocol and a JSON file implementation."""

from __future__ import annotations

import json
import os
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping, MutableMapping, Protocol, Sequence

from .errors import NotFoundError, RepositoryError
from .models import Quiz, check_content

__all__ = [
    "DEFAULT_QUIZZES",
    "QuizRepository",
    "JsonQuizRepository",
]


DEFAULT_QUIZZES: Sequence[tuple[str, str]] = (
    ("Capital of Italy", "Rome"),
    ("Capital of France", "Paris"),
    ("Capital of Spain", "Madrid"),
    ("Capital of Portugal", "Lisbon"),
)

_LOCK_TIMEOUT_SECONDS = 5.0
_FORMAT_VERSION = 1


class QuizRepository(Protocol):
    """Storage operations the quiz commands rely on."""

    def find_all(self) -> list[Quiz]:
        """Return every quiz ordered by id."""

    def find_by_id(self, quiz_id: int) -> Quiz | None:
        """Return the quiz with ``quiz_id`` or ``None``."""

    def create(self, question: str, answer: str) -> Quiz:
        """Store a new quiz and return it with its assigned id."""

    def destroy(self, quiz_id: int) -> int:
        """Remove the quiz with ``quiz_id``; return how many were removed."""

    def save(self, quiz: Quiz) -> Quiz:
        """Persist edits made to a quiz previously returned by a finder."""


class JsonQuizRepository:
    """Keep quizzes in a single JSON document.

    Every mutation re-reads the file under an exclusive lock file and
    replaces it atomically, so two shells pointed at the same store do not
    lose each other's writes.
    """

    def __init__(self, path: Path, *, seed_defaults: bool = False) -> None:
        self._path = path
        self._lock_path = path.with_name(path.name + ".lock")
        self._seed_defaults = seed_defaults

    @property
    def path(self) -> Path:
        return self._path

    def initialize(self) -> bool:
        """Create the store file if needed; return ``True`` when created.

        An existing store is read once so a corrupt file is reported at
        startup rather than on the first command.
        """

        with self._locked():
            if self._path.exists():
                self._read()
                return False
            state = _empty_state()
            if self._seed_defaults:
                for question, answer in DEFAULT_QUIZZES:
                    _append(state, question, answer)
            self._write(state)
            return True

    def find_all(self) -> list[Quiz]:
        state = self._read()
        return sorted(
            (Quiz.from_dict(item) for item in state["quizzes"]),
            key=lambda quiz: quiz.id,
        )

    def find_by_id(self, quiz_id: int) -> Quiz | None:
        for quiz in self.find_all():
            if quiz.id == quiz_id:
                return quiz
        return None

    def create(self, question: str, answer: str) -> Quiz:
        question, answer = check_content(question, answer)
        with self._locked():
            state = self._read()
            entry = _append(state, question, answer)
            self._write(state)
        return Quiz.from_dict(entry)

    def destroy(self, quiz_id: int) -> int:
        with self._locked():
            state = self._read()
            kept = [
                item for item in state["quizzes"] if item.get("id") != quiz_id
            ]
            removed = len(state["quizzes"]) - len(kept)
            if removed:
                state["quizzes"] = kept
                self._write(state)
        return removed

    def save(self, quiz: Quiz) -> Quiz:
        question, answer = check_content(quiz.question, quiz.answer)
        with self._locked():
            state = self._read()
            for item in state["quizzes"]:
                if item.get("id") == quiz.id:
                    item["question"] = question
                    item["answer"] = answer
                    break
            else:
                raise NotFoundError(quiz.id)
            self._write(state)
        quiz.question = question
        quiz.answer = answer
        return quiz

    def _read(self) -> MutableMapping[str, Any]:
        if not self._path.exists():
            return _empty_state()
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RepositoryError(
                f"Unable to read quiz store {self._path}: {exc}"
            ) from exc
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise RepositoryError(
                f"Failed to parse quiz store: {self._path}"
            ) from exc
        if not isinstance(payload, Mapping) or not isinstance(
            payload.get("quizzes"), list
        ):
            raise RepositoryError(
                f"Unexpected structure in {self._path}; expected a "
                "'quizzes' list."
            )
        state = dict(payload)
        state.setdefault("next_id", _next_id(state["quizzes"]))
        return state

    def _write(self, state: Mapping[str, Any]) -> None:
        try:
            _atomic_write_json(self._path, state)
        except OSError as exc:
            raise RepositoryError(
                f"Unable to write quiz store {self._path}: {exc}"
            ) from exc

    @contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RepositoryError(
                f"Unable to create quiz store directory: {exc}"
            ) from exc
        deadline = time.time() + _LOCK_TIMEOUT_SECONDS
        while True:
            try:
                fd = os.open(
                    self._lock_path,
                    os.O_CREAT | os.O_EXCL | os.O_WRONLY,
                )
                os.close(fd)
                break
            except FileExistsError:
                if time.time() > deadline:
                    raise RepositoryError(
                        f"Timed out waiting for quiz store lock: "
                        f"{self._lock_path}"
                    )
                time.sleep(0.05)
            except OSError as exc:
                raise RepositoryError(
                    f"Unable to lock quiz store: {exc}"
                ) from exc
        try:
            yield
        finally:
            self._lock_path.unlink(missing_ok=True)


def _empty_state() -> MutableMapping[str, Any]:
    return {"version": _FORMAT_VERSION, "next_id": 1, "quizzes": []}


def _next_id(entries: Sequence[Mapping[str, Any]]) -> int:
    try:
        ids = [int(item.get("id", 0)) for item in entries]
    except (AttributeError, TypeError, ValueError) as exc:
        raise RepositoryError("Malformed quiz id in store.") from exc
    return max(ids, default=0) + 1


def _append(
    state: MutableMapping[str, Any], question: str, answer: str
) -> MutableMapping[str, Any]:
    # Ids are never reused, even after the highest one is destroyed.
    quiz_id = max(int(state["next_id"]), _next_id(state["quizzes"]))
    entry = Quiz(id=quiz_id, question=question, answer=answer).to_dict()
    state["quizzes"].append(entry)
    state["next_id"] = quiz_id + 1
    return entry


def _atomic_write_json(path: Path, payload: Mapping[str, Any]) -> None:
    handle = tempfile.NamedTemporaryFile(
        "w",
        delete=False,
        encoding="utf-8",
        dir=str(path.parent),
    )
    try:
        json.dump(payload, handle, indent=2, sort_keys=True)
        handle.flush()
        os.fsync(handle.fileno())
    finally:
        handle.close()
    os.replace(handle.name, path)
    try:
        path.chmod(0o600)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
