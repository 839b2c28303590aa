"""In-memory collaborators for exercising the command engine and shell."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from quiz_manager.quizzer.errors import QuizNotFoundError, QuizValidationError
from quiz_manager.quizzer.manager.quiz import validate_quiz_fields
from quiz_manager.quizzer.models import Quiz


class MemoryRepository:
    """Repository double that keeps quizzes in a list and records calls."""

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        self.quizzes: list[Quiz] = []
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self.fail_with: Optional[Exception] = None
        self._next_id = 1
        for question, answer in pairs:
            self._insert(question, answer)

    def find_all(self) -> list[Quiz]:
        self._record("find_all")
        return [quiz.copy() for quiz in self.quizzes]

    def find_by_id(self, quiz_id: int) -> Optional[Quiz]:
        self._record("find_by_id", quiz_id)
        for quiz in self.quizzes:
            if quiz.id == quiz_id:
                return quiz.copy()
        return None

    def create(self, question: str, answer: str) -> Quiz:
        self._record("create", question, answer)
        messages = validate_quiz_fields(question, answer)
        if messages:
            raise QuizValidationError(messages)
        return self._insert(question, answer).copy()

    def update(self, quiz: Quiz) -> Quiz:
        self._record("update", quiz.copy())
        messages = validate_quiz_fields(quiz.question, quiz.answer)
        if messages:
            raise QuizValidationError(messages)
        for idx, existing in enumerate(self.quizzes):
            if existing.id == quiz.id:
                self.quizzes[idx] = quiz.copy()
                return quiz.copy()
        raise QuizNotFoundError(quiz.id)

    def destroy(self, quiz_id: int) -> int:
        self._record("destroy", quiz_id)
        before = len(self.quizzes)
        self.quizzes = [quiz for quiz in self.quizzes if quiz.id != quiz_id]
        return before - len(self.quizzes)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _insert(self, question: str, answer: str) -> Quiz:
        quiz = Quiz(id=self._next_id, question=question, answer=answer)
        self._next_id += 1
        self.quizzes.append(quiz)
        return quiz

    def _record(self, name: str, *args: object) -> None:
        self.calls.append((name, args))
        if self.fail_with is not None:
            raise self.fail_with


@dataclass
class ScriptedSession:
    """Session handle answering prompts from a fixed list of replies.

    A reply may be an exception instance, which is raised instead.
    """

    replies: list[object] = field(default_factory=list)
    asked: list[tuple[str, Optional[str]]] = field(default_factory=list)
    prompts: int = 0
    closes: int = 0

    def ask(self, label: str, *, prefill: Optional[str] = None) -> str:
        self.asked.append((label, prefill))
        if not self.replies:
            raise EOFError
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return str(reply).strip()

    def prompt(self) -> None:
        self.prompts += 1

    def close(self) -> None:
        self.closes += 1


@dataclass
class ScriptedPrompter:
    """Shell prompter fed by separate command and answer scripts."""

    commands: list[object] = field(default_factory=list)
    answers: list[object] = field(default_factory=list)
    asked: list[tuple[str, Optional[str]]] = field(default_factory=list)

    def read_command(self, label: str) -> str:
        return self._next(self.commands)

    def ask(self, label: str, *, prefill: Optional[str] = None) -> str:
        self.asked.append((label, prefill))
        return self._next(self.answers)

    @staticmethod
    def _next(script: list[object]) -> str:
        if not script:
            raise EOFError
        item = script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return str(item).strip()
