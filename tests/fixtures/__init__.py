"""Shared testing fixtures for the quiz_manager test suite."""

from .prompt import ScriptedPrompt  # noqa: F401
from .repository import FailingRepository, SpyRepository  # noqa: F401

__all__ = [
    "FailingRepository",
    "ScriptedPrompt",
    "SpyRepository",
]
