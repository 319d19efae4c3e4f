from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

# Ensure src/ is importable without an editable install
ROOT = TESTS_DIR.parent
for extra in (ROOT / "src",):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import FailingRepository, ScriptedPrompt  # noqa: E402
from quiz_manager.core import workspace as workspace_mod  # noqa: E402
from quiz_manager.repository import JsonQuizRepository  # noqa: E402


@pytest.fixture
def repository(tmp_path: Path) -> JsonQuizRepository:
    """An empty JSON quiz store under pytest's tmp directory."""

    return JsonQuizRepository(tmp_path / "quizzes.json")


@pytest.fixture
def failing_repository() -> FailingRepository:
    return FailingRepository()


@pytest.fixture
def prompt() -> type[ScriptedPrompt]:
    """Factory for scripted prompt surfaces: ``prompt(["answer", ...])``."""

    return ScriptedPrompt


@pytest.fixture(autouse=True)
def _isolate_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    monkeypatch.setenv(workspace_mod.WORKSPACE_ENV, str(tmp_path / "home"))
    monkeypatch.delenv("QUIZ_MANAGER_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    logger = logging.getLogger("quiz_manager")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
