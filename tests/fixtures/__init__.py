"""Shared testing fixtures for the quiz-manager test suite."""

from .quizzes import (  # noqa: F401
    MemoryRepository,
    ScriptedPrompter,
    ScriptedSession,
)

__all__ = [
    "MemoryRepository",
    "ScriptedPrompter",
    "ScriptedSession",
]
